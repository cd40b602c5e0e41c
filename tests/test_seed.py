from app.core.config import settings
from app.core.security import verify_password
from app.models.user import User, UserRole
from app.services.seed import seed_admin


def test_seeds_first_admin(db, monkeypatch):
    monkeypatch.setattr(settings, "SEED_ADMIN_EMAIL", " Root@Example.com ")
    monkeypatch.setattr(settings, "SEED_ADMIN_PASSWORD", "bootstrap-pass")

    admin = seed_admin(db)

    assert admin.email == "root@example.com"
    assert admin.role == UserRole.ADMIN
    assert verify_password("bootstrap-pass", admin.password_hash)
    # second run is a no-op
    assert seed_admin(db) is None
    assert db.query(User).count() == 1


def test_skips_without_credentials(db, monkeypatch):
    monkeypatch.setattr(settings, "SEED_ADMIN_EMAIL", None)
    assert seed_admin(db) is None
    assert db.query(User).count() == 0


def test_email_taken_by_driver(db, make_user, monkeypatch):
    driver = make_user(email="root@example.com")
    monkeypatch.setattr(settings, "SEED_ADMIN_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "SEED_ADMIN_PASSWORD", "bootstrap-pass")

    assert seed_admin(db) is None
    assert db.query(User).count() == 1
    db.refresh(driver)
    assert driver.role == UserRole.DRIVER
