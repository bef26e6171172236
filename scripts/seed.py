#!/usr/bin/env python3
"""Seed the database with sample prospects and follow-ups.

Color codes and next follow-up dates are left empty; the API fills them
in on startup.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from datetime import timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from followup_flow.config import settings
from followup_flow.database import Base
from followup_flow.models import FollowUp, Interaction, Prospect
from followup_flow.schemas.common import utcnow

AVATAR_URL = "https://placehold.co/100x100.png"


def sample_prospects(now):
    def days(n):
        return now + timedelta(days=n)

    alice = Prospect(
        id="seed-alice",
        owner_id=settings.default_user,
        name="Alice Wonderland",
        email="alice@example.com",
        phone="555-1234",
        initial_data="Interested in AI solutions for retail. Met at TechCon 2024.",
        current_funnel_stage="Viewed Media/Presentation",
        follow_up_stage_number=3,
        avatar_url=AVATAR_URL,
        last_contacted_date=days(-2),
        interaction_history=[
            Interaction(id="seed-int1", position=0, date=days(-5), type="Email",
                        summary="Sent initial brochure.", outcome="Opened email."),
            Interaction(id="seed-int2", position=1, date=days(-2), type="Call",
                        summary="Brief discussion about needs.", outcome="Scheduled demo."),
        ],
    )
    bob = Prospect(
        id="seed-bob",
        owner_id=settings.default_user,
        name="Bob The Builder",
        email="bob@example.com",
        initial_data="Looking for project management tools. Referral from John Doe.",
        current_funnel_stage="Prospect",
        follow_up_stage_number=1,
        avatar_url=AVATAR_URL,
    )
    charlie = Prospect(
        id="seed-charlie",
        owner_id=settings.default_user,
        name="Charlie Brown",
        email="charlie@example.com",
        phone="555-5678",
        initial_data="Needs help with team collaboration software. Small startup.",
        current_funnel_stage="Spoke with Third-Party",
        follow_up_stage_number=8,
        avatar_url=AVATAR_URL,
        last_contacted_date=days(-1),
        interaction_history=[
            Interaction(id="seed-int3", position=0, date=days(-10), type="Meeting",
                        summary="Initial discovery meeting."),
            Interaction(id="seed-int4", position=1, date=days(-5), type="Email",
                        summary="Followed up with proposal."),
            Interaction(id="seed-int5", position=2, date=days(-1), type="Call",
                        summary="Discussed proposal with expert.", outcome="Positive feedback."),
        ],
    )
    return [alice, bob, charlie]


def sample_follow_ups(now):
    def day(n):
        return (now + timedelta(days=n)).date()

    def follow_up(fid, prospect_id, n, time, method, notes):
        return FollowUp(id=fid, owner_id=settings.default_user, prospect_id=prospect_id,
                        date=day(n), time=time, method=method, notes=notes)

    return [
        follow_up("seed-fu1", "seed-alice", 1, "10:00", "Email", "Follow up on demo, gather feedback."),
        follow_up("seed-fu2", "seed-bob", 3, "14:30", "Call", "Initial outreach call."),
        follow_up("seed-fu3", "seed-charlie", 5, "11:00", "Email", "Send case study relevant to their industry."),
        follow_up("seed-fu4", "seed-alice", 8, "15:00", "Call", "Check in before end of quarter."),
    ]


def seed():
    engine = create_engine(settings.database_url_sync)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    # Check if sample data already exists
    existing = session.get(Prospect, "seed-alice")
    if existing:
        print(f"Sample prospects already exist: {existing.id}")
        session.close()
        return

    now = utcnow()
    prospects = sample_prospects(now)
    session.add_all(prospects)
    session.flush()
    session.add_all(sample_follow_ups(now))
    session.commit()
    print(f"Created {len(prospects)} sample prospects with 4 follow-ups")
    session.close()


if __name__ == "__main__":
    seed()
