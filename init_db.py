#!/usr/bin/env python3
"""
Database setup script for the Student Records API

    python init_db.py            create missing tables and the default admin
    python init_db.py --reset    drop everything first (asks for confirmation)
"""

import sys
from app import create_app
from database import reset_database

def confirm_reset():
    print("WARNING: --reset drops every student, mark and attendance record.")
    answer = input("Type 'yes' to continue: ")
    return answer.strip().lower() == 'yes'

def main(argv):
    app = create_app()
    admin_email = app.config['DEFAULT_ADMIN_EMAIL']

    if '--reset' not in argv:
        print(f"Tables ready. Admin login: {admin_email}")
        return 0

    if not confirm_reset():
        print("Reset cancelled.")
        return 1

    reset_database(app)
    print(f"Database reset. Admin login: {admin_email}")
    return 0

if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
