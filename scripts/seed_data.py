"""Seed a running server with sample documents, or write them as a seed file."""

from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

import httpx

SAMPLE_DOCS = [
    {
        "id": "hr-leave-procedures",
        "text": """Leave requests are submitted through the HR portal.

1. Open the HR portal and choose New Leave Request.
2. Select the leave type (vacation, sick leave, parental leave) and the dates.
3. Submit the request. Your manager receives an approval task.

Managers approve or reject requests within three working days. Vacation requests of more than ten consecutive days need approval two weeks in advance.
""",
        "metadata": {
            "title": "Leave Procedures",
            "path": "HR > Policies > Leave Procedures",
            "spaceKey": "HR",
            "knowledgeBaseId": "kb-hr",
            "keywords": ["leave", "vacation", "approval"],
            "webUrl": "https://wiki.example.com/hr/leave-procedures",
        },
    },
    {
        "id": "hr-expenses",
        "text": """Expense reports must include itemized receipts.

Submit reports within 30 days of the expense. Finance reimburses approved expenses with the next payroll run. Travel expenses above 500 EUR need pre-approval.
""",
        "metadata": {
            "title": "Expense Reimbursement",
            "path": "Finance > Policies > Expense Reimbursement",
            "spaceKey": "FIN",
            "knowledgeBaseId": "kb-fin",
            "keywords": ["expenses", "receipts", "reimbursement"],
        },
    },
    {
        "id": "eng-weekly-250310",
        "text": """Attendees: Dana, Lee, Priya.

Discussed: database migration progress, release schedule for Q2.
Decisions: schema changes are frozen until the migration completes.
Action items: Lee prepares the rollback plan; Priya updates the runbook.
""",
        "metadata": {
            "title": "Engineering Weekly 250310",
            "path": "Engineering > Meetings > Engineering Weekly 250310",
            "spaceKey": "ENG",
            "knowledgeBaseId": "kb-eng",
            "keywords": ["meeting", "migration"],
        },
    },
    {
        "id": "eng-deployment",
        "text": """Deployments run every Tuesday and Thursday.

The release manager tags the build. The pipeline runs smoke tests in staging and promotes the build to production once they pass. Hotfixes follow the same pipeline with an expedited review.
""",
        "metadata": {
            "title": "Deployment Process",
            "path": "Engineering > Operations > Deployment Process",
            "spaceKey": "ENG",
            "knowledgeBaseId": "kb-eng",
            "keywords": ["deployment", "release"],
        },
    },
]


async def post_documents(base_url: str) -> None:
    async with httpx.AsyncClient(base_url=base_url, timeout=60.0) as client:
        response = await client.post("/documents", json={"documents": SAMPLE_DOCS})
        response.raise_for_status()
        result = response.json()
        print(f"Indexed {result['documents']} documents: {result['chunks_created']} chunks")

        health = (await client.get("/health")).json()
        print(f"Total chunks: {health['indexed_chunks']}")


def write_seed_file(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(SAMPLE_DOCS, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Wrote {len(SAMPLE_DOCS)} documents to {path}")
    print(f"Start the server with DOC_CHAT_SEED_DOCUMENTS_PATH={path} to index them at startup")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default="http://localhost:8000", help="Server base URL")
    parser.add_argument("--out", type=Path, help="Write a seed file instead of posting")
    args = parser.parse_args()

    if args.out:
        write_seed_file(args.out)
    else:
        asyncio.run(post_documents(args.url))


if __name__ == "__main__":
    main()
