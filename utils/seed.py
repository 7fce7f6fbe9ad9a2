"""
Sample data for development databases.

Users share one password (SEED_DEFAULT_PASSWORD) so any of them can log in.
Each helper takes the DBStorage explicitly and commits its own work.
"""
from __future__ import annotations

import logging
import math
import random
from datetime import timedelta
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models.base_model import utcnow
from models.contact_form import ContactForm
from models.refresh_token import RefreshToken
from models.user import Role, User
from utils.security import create_refresh_token, hash_password, token_payload
from utils.tokens import store_refresh_token

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    ("Main Admin", "admin@test.com", Role.ADMIN),
    ("Demo User", "user@test.com", Role.USER),
    ("Maria Garcia", "maria.garcia@test.com", Role.USER),
    ("Carlos Lopez", "carlos.lopez@test.com", Role.USER),
    ("Ana Martinez", "ana.martinez@test.com", Role.ADMIN),
]

FIRST_NAMES = [
    "John", "Maria", "Carlos", "Ana", "Luis", "Carmen", "Peter", "Laura",
    "Miguel", "Isabel", "Jose", "Patricia", "Francis", "Sofia", "Anthony",
    "Elena", "Manuel", "Cristina", "David", "Monica",
]

LAST_NAMES = [
    "Garcia", "Lopez", "Martinez", "Gonzalez", "Perez", "Sanchez", "Ramirez",
    "Torres", "Flores", "Rivera", "Gomez", "Diaz", "Cruz", "Morales",
    "Ortiz", "Gutierrez", "Chavez", "Ramos", "Herrera", "Jimenez",
]

FORM_NAMES = [
    "John Perez", "Maria Garcia", "Carlos Lopez", "Ana Martinez", "Luis Gonzalez",
    "Carmen Sanchez", "Peter Ramirez", "Laura Torres", "Miguel Flores", "Isabel Rivera",
]

FORM_EMAILS = [
    "john.perez@email.com", "maria.garcia@email.com", "carlos.lopez@email.com",
    "ana.martinez@email.com", "luis.gonzalez@email.com", "carmen.sanchez@email.com",
]

FORM_PHONES = [
    "+1234567890", "+9876543210", "+5555555555", "+1111111111", "+2222222222",
    "+3333333333", "+4444444444", "+6666666666",
]

FORM_MESSAGES = [
    "I am interested in your services. Could you contact me?",
    "I would like more information about the available products.",
    "I have a question about pricing and availability.",
    "I would like to schedule a meeting to discuss a proposal.",
    "I need technical support for a product I bought.",
    "Could you send me your warranty and return policies?",
    "I am looking for a custom solution for my company.",
    "Do you offer discounts for bulk purchases?",
    "I would like to schedule a product demo.",
    "I have trouble with my account and need help.",
]


def create_tables(storage) -> List[str]:
    storage.create_tables()
    return ["users", "refresh_tokens", "contact_forms"]


def clear_existing_data(storage) -> Dict[str, int]:
    """Delete every refresh token, form and user, in that order."""
    session = storage.get_session()
    results = {
        "refresh_tokens_deleted": session.query(RefreshToken).delete(synchronize_session=False),
        "forms_deleted": session.query(ContactForm).delete(synchronize_session=False),
        "users_deleted": session.query(User).delete(synchronize_session=False),
    }
    storage.save()
    logger.info("Cleared seed data: %s", results)
    return results


def generate_users(storage, count: int, password: str) -> List[User]:
    """Create the fixed sample users, then random ones until count is reached."""
    password_hash = hash_password(password)
    specs = [(name, email, role, True) for name, email, role in SAMPLE_USERS]
    for i in range(len(specs), count):
        first = random.choice(FIRST_NAMES)
        last = random.choice(LAST_NAMES)
        role = Role.ADMIN if random.random() > 0.8 else Role.USER
        is_active = random.random() > 0.1
        specs.append((f"{first} {last}", f"{first.lower()}.{last.lower()}{i}@test.com", role, is_active))

    created = []
    for name, email, role, is_active in specs:
        user = User(name=name, email=email, password_hash=password_hash, role=role, is_active=is_active)
        storage.new(user)
        try:
            storage.save()
        except IntegrityError:
            logger.warning("Skipping seed user %s: already exists", email)
            continue
        created.append(user)
    return created


def generate_forms(storage, count: int) -> int:
    now = utcnow()
    for _ in range(count):
        storage.new(ContactForm(
            full_name=random.choice(FORM_NAMES),
            email=random.choice(FORM_EMAILS),
            phone=random.choice(FORM_PHONES),
            message=random.choice(FORM_MESSAGES),
            submitted_at=now - timedelta(days=random.randint(0, 29)),
        ))
    storage.save()
    return count


def generate_refresh_tokens(storage, users: List[User]) -> int:
    """Give the first 60% of the active users a stored refresh token."""
    active = [u for u in users if u.is_active]
    created = 0
    for user in active[:math.ceil(len(active) * 0.6)]:
        store_refresh_token(storage, create_refresh_token(token_payload(user)), user.id)
        created += 1
    return created


def run_seed(storage, user_count: int, form_count: int, clear_data: bool, password: str) -> Dict:
    results = {
        "tables_created": False,
        "data_cleared": clear_data,
        "users_created": 0,
        "forms_created": 0,
        "tokens_created": 0,
    }
    create_tables(storage)
    results["tables_created"] = True
    if clear_data:
        clear_existing_data(storage)
    users = generate_users(storage, user_count, password)
    results["users_created"] = len(users)
    results["forms_created"] = generate_forms(storage, form_count)
    results["tokens_created"] = generate_refresh_tokens(storage, users)
    logger.info("Seed finished: %s", results)
    return results


def seed_status(storage) -> Dict:
    session = storage.get_session()
    by_role = dict(session.query(User.role, func.count(User.id)).group_by(User.role).all())
    by_status = dict(session.query(User.is_active, func.count(User.id)).group_by(User.is_active).all())
    return {
        "tables": {
            "users": session.query(User).count(),
            "contact_forms": session.query(ContactForm).count(),
            "refresh_tokens": session.query(RefreshToken).filter(RefreshToken.revoked.is_(False)).count(),
        },
        "users_by_role": {getattr(role, "value", role): count for role, count in by_role.items()},
        "users_by_status": {
            "active": by_status.get(True, 0),
            "inactive": by_status.get(False, 0),
        },
    }
