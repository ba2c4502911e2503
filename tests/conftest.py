"""Pytest fixtures for storefront tests."""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

import storefront.db.models  # noqa
from storefront.core.auth import Identity
from storefront.db import session
from storefront.db.models import Product, User
from storefront.db.session import Base
from storefront.security.utils import create_access_token, hash_password

_seq = itertools.count(1)

# bcrypt is slow on purpose; hash the shared test password once
PASSWORD = "secret123"
_PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
    """In-memory SQLite shared by the test session and the app's sessions."""
    eng = session.init_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    session.dispose_engine()


@pytest.fixture
def db(engine):
    s = session.SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(engine):
    from storefront.main import app

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(role: str = "user", email: str | None = None, user_name: str | None = None) -> User:
        n = next(_seq)
        user = User(
            user_name=user_name or f"user{n}",
            email=email or f"user{n}@example.com",
            password_hash=_PASSWORD_HASH,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_product(db):
    def _make(price: float = 10.0, name: str | None = None, category: str = "fiction", quantity: int = 5) -> Product:
        product = Product(name=name or f"Book {next(_seq)}", price=price, category=category, quantity=quantity)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def identity_for():
    def _identity(user: User) -> Identity:
        return Identity(subject_id=user.id, role=user.role)

    return _identity


@pytest.fixture
def auth_header():
    def _header(user: User) -> dict:
        token, _ = create_access_token(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def user_password():
    """Plain-text password of every user built by ``make_user``."""
    return PASSWORD
