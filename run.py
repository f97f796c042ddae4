import argparse
import getpass
import os
import sys

from dotenv import load_dotenv

# Settings read the environment on import; .env must be loaded first
load_dotenv()

import uvicorn  # noqa: E402


def run_migrations():
    """Run Alembic migrations."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")
    print("[STARTUP] Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    print("[STARTUP] Migrations complete!")


def create_admin(username: str):
    """Create the first admin account; nothing else can, since /api/users requires one."""
    from app.core.exceptions import ConflictError
    from app.database import SessionLocal, init_db
    from app.models.user import UserRole
    from app.services.auth_service import create_user

    init_db()
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    db = SessionLocal()
    try:
        user = create_user(db, username=username, full_name=username, password=password, role=UserRole.ADMIN)
        print(f"[OK] Admin {user.username} created")
    except ConflictError as e:
        print(f"[WARN] {e.reason}")
        sys.exit(1)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Rental Ledger API")
    parser.add_argument("--migrate", action="store_true", help="apply Alembic migrations before serving")
    parser.add_argument("--create-admin", metavar="USERNAME", help="create an admin account and exit")
    args = parser.parse_args()

    if args.create_admin:
        create_admin(args.create_admin)
        return

    if args.migrate or os.getenv("RUN_MIGRATIONS") == "true":
        run_migrations()

    from app.core.config import settings

    print(f"[STARTUP] Server binding to host={settings.HOST} port={settings.PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1,
    )


if __name__ == "__main__":
    main()
