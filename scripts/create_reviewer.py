"""Create or update a reviewer account.

  python scripts/create_reviewer.py alice --role panel --domain gen_ai
  python scripts/create_reviewer.py root --role admin
"""
import argparse
import getpass
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app  # noqa: E402
from app.extensions import db  # noqa: E402
from app.models.application import TECHNICAL_DOMAINS  # noqa: E402
from app.models.user import User  # noqa: E402


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('username')
    parser.add_argument('--role', choices=['admin', 'panel'], default='panel')
    parser.add_argument('--domain', choices=TECHNICAL_DOMAINS)
    parser.add_argument('--password', help='prompted for when omitted')
    args = parser.parse_args(argv)

    if args.role == 'panel' and not args.domain:
        parser.error('--domain is required for panel accounts')
    password = args.password or getpass.getpass('Password: ')
    if len(password) < 8:
        parser.error('password must be at least 8 characters')

    app = create_app()
    with app.app_context():
        user = User.query.filter_by(username=args.username).first()
        created = user is None
        if created:
            user = User(username=args.username)
            db.session.add(user)
        user.role = args.role
        user.domain = args.domain if args.role == 'panel' else None
        user.set_password(password)
        db.session.commit()
        print(f"{'created' if created else 'updated'} {user.role} {user.username}"
              + (f" ({user.domain})" if user.domain else ""))


if __name__ == '__main__':
    main()
