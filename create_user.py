from app import create_app
from extensions import db
from models import User
from permissions import ROLES


def create_user(app, username, password, role):
    with app.app_context():
        # usernames are unique
        existing_user = User.query.filter_by(username=username).first()
        if existing_user:
            print(f"User '{username}' already exists with role '{existing_user.role}'.")
            return

        user = User(username=username, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        print(f"Created user: {username} (role: {role})")


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('username', help='Username')
    parser.add_argument('password', help='Password')
    parser.add_argument('role', choices=ROLES, help='User role')

    args = parser.parse_args()
    create_user(create_app(), args.username, args.password, args.role)
