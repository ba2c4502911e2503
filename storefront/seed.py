"""seed.py — run Alembic migrations and make sure an admin account exists."""
import argparse
import logging
import os
import subprocess
from pathlib import Path

from sqlalchemy.orm import Session

from storefront.core.logging import configure_logging
from storefront.db import session
from storefront.db.models import User
from storefront.security.utils import hash_password, now_utc

logger = logging.getLogger(__name__)


def run_alembic(project_root: Path):
    if not (project_root / "alembic.ini").exists():
        logger.warning("skipping migrations: no alembic.ini in %s", project_root)
        return
    logger.info("running alembic upgrade head")
    subprocess.run(["alembic", "upgrade", "head"], cwd=project_root, check=True)


def ensure_admin(db: Session, email: str, password: str, user_name: str = "admin") -> tuple[User, bool]:
    """Create the admin user, or promote an existing account with that email."""
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        if user.role != "admin":
            user.role = "admin"
            user.updated_at = now_utc()
            db.add(user); db.commit(); db.refresh(user)
            logger.info("promoted %s to admin", email)
        return user, False
    user = User(
        user_name=user_name,
        email=email,
        password_hash=hash_password(password),
        role="admin",
        created_at=now_utc(),
        updated_at=now_utc(),
    )
    db.add(user); db.commit(); db.refresh(user)
    logger.info("created admin %s", email)
    return user, True


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--skip-migrations", action="store_true", help="Do not run alembic")
    ap.add_argument("--admin-email", default=os.getenv("ADMIN_EMAIL"))
    ap.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD"))
    ap.add_argument("--admin-name", default=os.getenv("ADMIN_NAME", "admin"))
    args = ap.parse_args(argv)

    configure_logging()
    if not args.skip_migrations:
        run_alembic(Path.cwd())

    if args.admin_email and args.admin_password:
        session.init_engine()
        db = session.SessionLocal()
        try:
            ensure_admin(db, args.admin_email, args.admin_password, args.admin_name)
        finally:
            db.close()
            session.dispose_engine()
    else:
        logger.info("no admin credentials given; skipping admin account")


if __name__ == "__main__":
    main()
