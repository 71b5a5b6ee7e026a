"""Demo data loaded into a fresh in-memory store."""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Callable, List

from ..core.timeutil import Clock
from ..domain.models import Interviewer, InterviewSlot, Role
from ..services.users import UserService
from ..storage import Repository

logger = logging.getLogger(__name__)

AVATAR = "/api/placeholder/40/40"
DEMO_PASSWORD = "password123"

INTERVIEWERS = [
    dict(name="Jane Smith", company="Google", designation="Senior Software Engineer",
         experience=8, hourly_rate=75, domains=("System Design", "Algorithms", "JavaScript"),
         rating=4.9, total_interviews=150),
    dict(name="Mark Johnson", company="Amazon", designation="Principal Engineer",
         experience=12, hourly_rate=90, domains=("Machine Learning", "Python", "Data Structures"),
         rating=4.8, total_interviews=200),
    dict(name="Emily Chen", company="Netflix", designation="Engineering Manager",
         experience=10, hourly_rate=70, domains=("Behavioral", "Leadership", "Data Science"),
         rating=4.7, total_interviews=120),
    dict(name="David Lee", company="Meta", designation="Staff Engineer",
         experience=9, hourly_rate=65, domains=("Backend", "Distributed Systems", "Go"),
         rating=4.8, total_interviews=95),
]

# (interviewer index, days from today, time, duration, price, type, domain, profile)
SLOTS = [
    (0, 10, "11:00 AM", 60, 60.0, "Technical", "Technical", "Software"),
    (1, 11, "3:00 PM", 45, 55.0, "Technical", "Technical", "AI"),
    (2, 12, "9:00 AM", 60, 70.0, "Behavioral", "Non-Technical", "Data Science"),
    (3, 13, "1:00 PM", 60, 65.0, "Technical", "Technical", "Software"),
]

USERS = [
    dict(name="Sarah Johnson", email="sarah@example.com", phone="+1234567890",
         college="Indian Institute of Technology (IIT)", course="Computer Science",
         current_year=3, graduation_year=2025,
         linkedin_url="https://linkedin.com/in/sarah-johnson",
         preferred_language="English", profile_completed=True),
    dict(name="John Doe", email="john@example.com", phone="+1987654321",
         college="National Institute of Technology (NIT)", course="Electrical Engineering",
         current_year=2, graduation_year=2026,
         linkedin_url="https://linkedin.com/in/john-doe",
         preferred_language="English", profile_completed=False),
]


def seed_demo_data(
    users: UserService,
    interviewers: Repository[Interviewer],
    slots: Repository[InterviewSlot],
    *,
    clock: Clock,
    hash_password: Callable[[str], str],
) -> None:
    created: List[Interviewer] = []
    for spec in INTERVIEWERS:
        interviewer = Interviewer(id=str(uuid.uuid4()), avatar=AVATAR, **spec)
        interviewers.add(interviewer)
        created.append(interviewer)

    today = clock().date()
    for idx, days, time, duration, price, type_, domain, profile in SLOTS:
        interviewer = created[idx]
        slots.add(
            InterviewSlot(
                id=str(uuid.uuid4()),
                interviewer_id=interviewer.id,
                interviewer_name=interviewer.name,
                interviewer_company=interviewer.company,
                interviewer_avatar=interviewer.avatar,
                date=today + timedelta(days=days),
                time=time,
                duration=duration,
                price=price,
                type=type_,
                domain=domain,
                profile=profile,
                available=True,
            )
        )

    password_hash = hash_password(DEMO_PASSWORD)
    for spec in USERS:
        profile_fields = dict(spec)
        user = users.create(profile_fields.pop("name"), profile_fields.pop("email"), password_hash)
        users.update(user.id, **profile_fields)

    logger.info(
        "demo data seeded",
        extra={"interviewers": len(created), "slots": len(SLOTS), "users": len(USERS)},
    )


def seed_admin(users: UserService, email: str, password_hash: str) -> None:
    if users.find_by_email(email) is None:
        users.create("Administrator", email, password_hash, role=Role.admin)
