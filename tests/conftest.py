from __future__ import annotations

from datetime import date

import pytest

from jobboard.models import JobRecord, SalaryRange

HEADER = [
    "Date", "Employer", "Job Title", "Pathway", "Language",
    "Salary Range", "Contact Person", "Location", "Deactivate?", "Apply",
]

ACME_ROW = [
    "01/15/2025", "Acme", "Dev", "Web", "JS,Python",
    "$60,000 - $80,000", "", "Remote", "FALSE", "http://x",
]

SHEET_CSV = (
    "Date,Employer,Job Title,Pathway,Language,Salary Range,Contact Person,Location,Deactivate?,Apply\r\n"
    '01/15/2025,Acme,Dev,Web,"JS,Python","$60,000 - $80,000",,Remote,FALSE,http://x\r\n'
    '02/01/2025,Globex,Data Analyst,Data,"SQL, Python","$45,000",Jane Roe,Louisville,false,https://globex.example/apply\r\n'
    "\r\n"
    '03/10/2025,Initech,Job 10,Web,Java,"$90,000 - $110,000",Bob,Northern_KY,TRUE,https://initech.example\r\n'
    "03/12/2025,Umbrella,Job 2,Software,C#,Not provided,,Remote,false,email hr@umbrella.example\r\n"
    "04/01/2025,Short Row Inc\r\n"
)


def make_job(
    title: str = "Developer",
    employer: str = "Acme",
    *,
    languages=None,
    salary=(None, None),
    location: str = "Remote",
    pathway: str = "Web",
    posted=None,
    deactivated: bool = False,
) -> JobRecord:
    return JobRecord(
        posted_date=posted,
        employer=employer,
        job_title=title,
        pathway=pathway,
        languages=list(languages or []),
        salary_range=SalaryRange(*salary),
        location=location,
        is_deactivated=deactivated,
    )


@pytest.fixture
def sheet_csv() -> str:
    return SHEET_CSV


@pytest.fixture
def jobs() -> list[JobRecord]:
    return [
        make_job("Dev", "Acme", languages=["JS", "Python"], salary=(60_000, 80_000), posted=date(2025, 1, 15)),
        make_job("Data Analyst", "Globex", languages=["SQL", "Python"], salary=(45_000, None),
                 location="Louisville", pathway="Data", posted=date(2025, 2, 1)),
        make_job("Job 10", "Initech", languages=["Java"], salary=(90_000, 110_000),
                 location="Northern KY", posted=date(2025, 3, 10)),
        make_job("Job 2", "Umbrella", languages=["C#"], location="Remote", pathway="Software",
                 posted=date(2025, 3, 12)),
        make_job("Architect", "Hooli", languages=["Go", "python"], salary=(120_000, 140_000),
                 location="", posted=None),
    ]
