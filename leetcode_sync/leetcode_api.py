"""
LeetCode GraphQL wrapper for the sync system.

Provides a clean interface to the LeetCode endpoints the sync needs:
- Solved problem listing
- Accepted submission lookup
- Submission source code
- Problem statement (rendered to Markdown)
"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Optional

import requests
from ratelimit import limits, sleep_and_retry
from rich.console import Console

from leetcode_sync.config import Config
from leetcode_sync.errors import NotFoundError, ProtocolError, TransportError
from leetcode_sync.markdown_converter import question_to_markdown

console = Console()

LEETCODE_URL = "https://leetcode.com"
LEETCODE_GRAPHQL_URL = f"{LEETCODE_URL}/graphql"

# Pacing only; failed requests are never retried
RATE_LIMIT_CALLS = 5
RATE_LIMIT_PERIOD = 1  # second

# statusDisplay / status code of an accepted submission
ACCEPTED_STATUS = "Accepted"
ACCEPTED_STATUS_CODE = 10

DEFAULT_LIST_LIMIT = 10000

SOLVED_PROBLEMS_QUERY = """
query problemsetQuestionListV2(
  $filters: QuestionFilterInput,
  $limit: Int,
  $searchKeyword: String,
  $skip: Int,
  $sortBy: QuestionSortByInput,
  $categorySlug: String
) {
  problemsetQuestionListV2(
    filters: $filters
    limit: $limit
    searchKeyword: $searchKeyword
    skip: $skip
    sortBy: $sortBy
    categorySlug: $categorySlug
  ) {
    questions {
      id
      titleSlug
      title
      questionFrontendId
      paidOnly
      difficulty
      status
    }
    totalLength
    hasMore
  }
}
"""

SUBMISSION_LIST_QUERY = """
query submissionList(
  $offset: Int!,
  $limit: Int!,
  $lastKey: String,
  $questionSlug: String!,
  $status: Int,
  $lang: Int
) {
  questionSubmissionList(
    offset: $offset
    limit: $limit
    lastKey: $lastKey
    questionSlug: $questionSlug
    status: $status
    lang: $lang
  ) {
    submissions {
      id
      timestamp
      statusDisplay
    }
  }
}
"""

SUBMISSION_DETAILS_QUERY = """
query submissionDetails($submissionId: Int!) {
  submissionDetails(submissionId: $submissionId) {
    code
    timestamp
    lang {
      name
    }
    question {
      titleSlug
    }
  }
}
"""

QUESTION_DETAIL_QUERY = """
query getQuestionDetail($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    title
    difficulty
    content
    topicTags {
      name
    }
  }
}
"""


def _empty_filter(key: str) -> dict:
    return {key: [], "operator": "IS"}


def _solved_filters() -> dict:
    return {
        "filterCombineType": "ALL",
        "statusFilter": {"questionStatuses": ["SOLVED"], "operator": "IS"},
        "difficultyFilter": _empty_filter("difficulties"),
        "languageFilter": _empty_filter("languageSlugs"),
        "topicFilter": _empty_filter("topicSlugs"),
        "acceptanceFilter": {},
        "frequencyFilter": {},
        "lastSubmittedFilter": {},
        "publishedFilter": {},
        "companyFilter": _empty_filter("companySlugs"),
        "positionFilter": _empty_filter("positionSlugs"),
        "premiumFilter": _empty_filter("premiumStatus"),
    }


def _utc_date(timestamp: int) -> str:
    """Epoch seconds to YYYY-MM-DD (UTC)."""
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError) as e:
        raise ProtocolError(f"Timestamp out of range: {timestamp}") from e


@dataclass(frozen=True)
class Submission:
    """An accepted submission with its source code."""

    id: int
    code: str
    timestamp: int
    lang: str = ""

    @property
    def date(self) -> str:
        """Submission day (UTC) as YYYY-MM-DD."""
        return _utc_date(self.timestamp)

    @classmethod
    def from_api_response(cls, submission_id: int, details: dict) -> "Submission":
        """Create Submission from a submissionDetails object."""
        if not isinstance(details, dict):
            raise ProtocolError(f"Submission {submission_id} details are malformed: {details!r}")

        code = details.get("code")
        if code is None:
            raise ProtocolError(f"Submission {submission_id} has no code")

        try:
            timestamp = int(details["timestamp"])
        except (KeyError, TypeError, ValueError) as e:
            raise ProtocolError(f"Submission {submission_id} has no valid timestamp") from e

        _utc_date(timestamp)

        lang = details.get("lang")
        lang = (lang.get("name") if isinstance(lang, dict) else None) or ""

        return cls(id=submission_id, code=code, timestamp=timestamp, lang=lang)


@dataclass(frozen=True)
class ProblemInfo:
    """
    One solved problem.

    Built by the listing with the identifying fields; the statement and
    submission date are attached by deriving new values, never by mutation.
    """

    id: str
    title: str
    title_slug: str
    difficulty: str
    question: str = ""
    time_stamp: str = ""

    @property
    def url(self) -> str:
        """Problem page on LeetCode."""
        return f"{LEETCODE_URL}/problems/{self.title_slug}/"

    def with_question(self, markdown: str) -> "ProblemInfo":
        return replace(self, question=markdown)

    def with_submission(self, submission: Submission) -> "ProblemInfo":
        return replace(self, time_stamp=submission.date)

    @classmethod
    def from_api_response(cls, item: dict) -> "ProblemInfo":
        """
        Create ProblemInfo from a problemsetQuestionListV2 entry.

        Raises:
            ProtocolError: If an identifying field is missing or empty.
        """
        if not isinstance(item, dict):
            raise ProtocolError(f"Problem entry is malformed: {item!r}")

        values = {}
        for field_name, key in (
            ("id", "id"),
            ("title", "title"),
            ("title_slug", "titleSlug"),
            ("difficulty", "difficulty"),
        ):
            value = item.get(key)
            if value is None or str(value).strip() == "":
                raise ProtocolError(f"Problem entry is missing '{key}': {item}")
            values[field_name] = str(value).strip()

        # The listing reports EASY/MEDIUM/HARD; folders use Easy/Medium/Hard
        values["difficulty"] = values["difficulty"].capitalize()

        return cls(**values)


def build_session(config: Config) -> requests.Session:
    """Create the HTTP session shared by every LeetCode call of a run."""
    session = requests.Session()
    session.headers.update({
        "Content-Type": "application/json",
        "User-Agent": "Mozilla/5.0 (compatible; leetcode-sync/1.0)",
        "Referer": LEETCODE_URL,
        "X-CSRFToken": config.leetcode_csrf_token,
    })
    session.cookies.set("LEETCODE_SESSION", config.leetcode_session, domain=".leetcode.com")
    session.cookies.set("csrftoken", config.leetcode_csrf_token, domain=".leetcode.com")
    return session


class LeetCodeAPI:
    """
    Wrapper around the LeetCode GraphQL endpoint.

    Handles:
    - Authentication (through the injected session)
    - Rate limiting (5 req/sec)
    - Response shape validation
    """

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        """
        Initialize the LeetCode client.

        Args:
            config: Configuration instance with LeetCode credentials.
            session: HTTP session to use. Built from config if omitted.
        """
        self.config = config
        self.session = session if session is not None else build_session(config)
        self._request_count = 0
        self._count_lock = threading.Lock()

    @sleep_and_retry
    @limits(calls=RATE_LIMIT_CALLS, period=RATE_LIMIT_PERIOD)
    def _rate_limited_call(self, func, *args, **kwargs) -> Any:
        """Execute a rate-limited API call."""
        with self._count_lock:
            self._request_count += 1
        return func(*args, **kwargs)

    def _graphql(
        self,
        operation_name: str,
        query: str,
        variables: dict,
        referer: Optional[str] = None,
    ) -> dict:
        """
        POST one GraphQL operation and return its `data` object.

        Raises:
            TransportError: On connection failures or non-2xx status.
            ProtocolError: If the body is not JSON or has no `data`.
        """
        payload = {
            "query": query,
            "variables": variables,
            "operationName": operation_name,
        }
        headers = {"Referer": referer} if referer else None

        if self.config.debug:
            console.print(f"[dim]GraphQL: {operation_name}[/dim]")

        try:
            response = self._rate_limited_call(
                self.session.post,
                LEETCODE_GRAPHQL_URL,
                json=payload,
                headers=headers,
            )
        except requests.RequestException as e:
            raise TransportError(f"LeetCode request '{operation_name}' failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"LeetCode request '{operation_name}' failed with status {response.status_code}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(f"LeetCode response for '{operation_name}' is not JSON") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            errors = body.get("errors") if isinstance(body, dict) else None
            raise ProtocolError(f"LeetCode response for '{operation_name}' has no data: {errors}")

        return data

    def get_solved_problems(self, limit: int = DEFAULT_LIST_LIMIT) -> list[ProblemInfo]:
        """
        Get every problem the account has solved.

        Args:
            limit: Page size sent to the server. One page is requested.

        Returns:
            ProblemInfo list in server order.

        Raises:
            ProtocolError: If the question list is missing from the response.
        """
        variables = {
            "skip": 0,
            "limit": limit,
            "categorySlug": "all-code-essentials",
            "filters": _solved_filters(),
            "searchKeyword": "",
            "sortBy": {"sortField": "CUSTOM", "sortOrder": "ASCENDING"},
        }

        data = self._graphql("problemsetQuestionListV2", SOLVED_PROBLEMS_QUERY, variables)

        questions = (data.get("problemsetQuestionListV2") or {}).get("questions")
        if not isinstance(questions, list):
            raise ProtocolError("No solved problems found or response format is invalid.")

        return [ProblemInfo.from_api_response(item) for item in questions]

    def get_accepted_submission_id(self, title_slug: str) -> Optional[int]:
        """
        Get the id of the most recent accepted submission for a problem.

        The server's default ordering decides which one is "most recent".

        Returns:
            Submission id, or None if the problem has no accepted submission.
        """
        variables = {
            "offset": 0,
            "limit": 1,
            "lastKey": None,
            "questionSlug": title_slug,
            "status": ACCEPTED_STATUS_CODE,
        }

        data = self._graphql("submissionList", SUBMISSION_LIST_QUERY, variables)

        submission_list = data.get("questionSubmissionList")
        if not isinstance(submission_list, dict):
            raise ProtocolError(f"Submission list missing for '{title_slug}'")

        submissions = submission_list.get("submissions") or []
        if not isinstance(submissions, list):
            raise ProtocolError(f"Malformed submission list for '{title_slug}': {submissions!r}")

        for submission in submissions:
            if not isinstance(submission, dict):
                raise ProtocolError(f"Malformed submission entry for '{title_slug}': {submission!r}")
            if submission.get("statusDisplay") == ACCEPTED_STATUS:
                try:
                    return int(submission["id"])
                except (KeyError, TypeError, ValueError) as e:
                    raise ProtocolError(f"Invalid submission id for '{title_slug}': {submission}") from e

        return None

    def get_submission(self, submission_id: int) -> Submission:
        """
        Get the source code and timestamp of a submission.

        Raises:
            NotFoundError: If the id resolves to no submission.
        """
        data = self._graphql(
            "submissionDetails",
            SUBMISSION_DETAILS_QUERY,
            {"submissionId": submission_id},
        )

        details = data.get("submissionDetails")
        if not details:
            raise NotFoundError(f"Submission {submission_id} not found")

        return Submission.from_api_response(submission_id, details)

    def get_question_markdown(self, title_slug: str) -> str:
        """Get a problem statement rendered as Markdown."""
        data = self._graphql(
            "getQuestionDetail",
            QUESTION_DETAIL_QUERY,
            {"titleSlug": title_slug},
            referer=f"{LEETCODE_URL}/problems/{title_slug}/",
        )

        question = data.get("question")
        if not isinstance(question, dict):
            raise ProtocolError(f"Question '{title_slug}' missing from response")

        return question_to_markdown(question)

    @property
    def request_count(self) -> int:
        """Number of API requests made."""
        return self._request_count
