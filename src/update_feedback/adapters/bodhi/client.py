"""Bodhi REST client for querying updates and creating comments."""

from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from update_feedback.core import (
    Bug,
    CandidateUpdate,
    Comment,
    FeedbackPayload,
    FeedbackSubmitter,
    Karma,
    QueryError,
    SubmissionError,
    SubmissionResult,
    TestCase,
    UpdateSource,
    UpdateStatus,
)

DEFAULT_URL = "https://bodhi.fedoraproject.org"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Bodhi timestamp (always UTC) into an aware datetime."""
    if not value:
        return None
    
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value)
    
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def update_from_json(data: dict[str, Any], base_url: str = DEFAULT_URL) -> CandidateUpdate:
    """Convert one update record from the API into a CandidateUpdate."""
    comments = [
        Comment(
            user=comment["user"]["name"],
            text=comment.get("text") or "",
            karma=Karma(comment.get("karma") or 0),
            timestamp=parse_timestamp(comment["timestamp"]),
        )
        for comment in data.get("comments") or []
    ]
    
    return CandidateUpdate(
        alias=data["alias"],
        title=data.get("title") or data["alias"],
        builds=[build["nvr"] for build in data.get("builds") or []],
        submitted_at=parse_timestamp(data.get("date_submitted")),
        user=data["user"]["name"],
        comments=comments,
        bugs=[Bug(bug_id=int(b["bug_id"]), title=b.get("title")) for b in data.get("bugs") or []],
        test_cases=[TestCase(name=t["name"]) for t in data.get("test_cases") or []],
        karma=data.get("karma"),
        stable_karma=data.get("stable_karma"),
        unstable_karma=data.get("unstable_karma"),
        notes=data.get("notes") or "",
        update_type=data.get("type") or "unspecified",
        status=UpdateStatus(data.get("status") or UpdateStatus.TESTING.value),
        pushed_at=parse_timestamp(data.get("date_pushed")),
        url=f"{base_url}/updates/{data['alias']}",
    )


class BodhiClient(UpdateSource, FeedbackSubmitter):
    """Query and comment on updates through the Bodhi JSON API.
    
    Authentication is not handled here: pass the headers or cookies of an
    already authenticated session if comments should be created.
    """
    
    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        timeout: float = 60.0,
        page_size: int = 50,
        headers: Optional[dict[str, str]] = None,
        cookies: Optional[dict[str, str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self.headers = {"Accept": "application/json", **(headers or {})}
        self.cookies = cookies or {}
    
    async def fetch_updates(self, release: str, status: UpdateStatus) -> list[CandidateUpdate]:
        """Fetch every page of RPM updates for a release in the given status."""
        updates: list[CandidateUpdate] = []
        page = 1
        pages = 1
        
        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            while page <= pages:
                params = {
                    "releases": release,
                    "status": status.value,
                    "content_type": "rpm",
                    "rows_per_page": self.page_size,
                    "page": page,
                }
                
                try:
                    response = await client.get(f"{self.base_url}/updates/", params=params)
                    response.raise_for_status()
                    data = response.json()
                except (httpx.HTTPError, ValueError) as e:
                    raise QueryError(f"Failed to query {status.value} updates: {e}") from e
                
                try:
                    updates.extend(update_from_json(u, self.base_url) for u in data["updates"])
                except (KeyError, TypeError, ValueError) as e:
                    raise QueryError(f"Unexpected update record from Bodhi: {e}") from e
                
                pages = int(data.get("pages") or 1)
                page += 1
        
        return updates
    
    async def submit(self, payload: FeedbackPayload) -> SubmissionResult:
        """Create a comment with karma and bug/test case feedback."""
        body: dict[str, Any] = {
            "update": payload.alias,
            "text": payload.text or "",
            "karma": payload.karma.value,
            "bug_feedback": [
                {"bug_id": bug_id, "karma": karma.value} for bug_id, karma in payload.bug_feedback
            ],
            "testcase_feedback": [
                {"testcase_name": name, "karma": karma.value}
                for name, karma in payload.testcase_feedback
            ],
        }
        
        async with httpx.AsyncClient(
            timeout=self.timeout, headers=self.headers, cookies=self.cookies
        ) as client:
            try:
                csrf = await client.get(f"{self.base_url}/csrf")
                csrf.raise_for_status()
                body["csrf_token"] = csrf.json()["csrf_token"]
                
                response = await client.post(f"{self.base_url}/comments/", json=body)
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, KeyError, ValueError) as e:
                raise SubmissionError(f"Failed to comment on {payload.alias}: {e}") from e
        
        caveats = [
            (str(caveat.get("name", "")), str(caveat.get("description", "")))
            for caveat in data.get("caveats") or []
        ]
        
        return SubmissionResult(alias=payload.alias, caveats=caveats)
