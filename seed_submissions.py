#!/usr/bin/env python
import random

from src.app.schemas.submission import SubmissionIn
from src.app.services.submission import submit_survey
from src.credit.catalog import CREDIT_ROLES, ICON_SET
from src.db import Base
from src.db.session import LocalSession, engine
import src.db.models  # noqa: F401

DEMO_PARTICIPANTS = [
    {"age": "18-25", "field_of_study": "Biology", "country_of_residence": "USA"},
    {"age": "26-35", "field_of_study": "Computer Science", "country_of_residence": "Germany"},
    {"age": "36-45", "field_of_study": "Psychology", "country_of_residence": "Canada"},
    {"age": "46-55", "field_of_study": "Chemistry", "country_of_residence": "Japan"},
    {"age": "56-65", "field_of_study": "Physics", "country_of_residence": "Brazil"},
]


def demo_payload(participant: dict, rng: random.Random) -> SubmissionIn:
    icons = [icon.name for icon in ICON_SET]
    rng.shuffle(icons)
    return SubmissionIn.model_validate({
        "participant": participant,
        "responses": [
            {"role_title": role.title, "assigned_icon": icon, "response_order": index}
            for index, (role, icon) in enumerate(zip(CREDIT_ROLES, icons))
        ],
    })


def main():
    Base.metadata.create_all(bind=engine)
    rng = random.Random(42)
    db = LocalSession()
    try:
        print("Seeded submissions:")
        for participant in DEMO_PARTICIPANTS:
            data = submit_survey(db, demo_payload(participant, rng))
            print(f"participant_id: {data.participant_id}  submission_id: {data.submission_id}  "
                  f"responses: {data.responses_count}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
