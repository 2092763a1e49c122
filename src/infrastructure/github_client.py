import asyncio
import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from src.domain.exceptions import ScmRequestError
from src.domain.models import PullRequestInput

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)


class GitHubRestClient:
    """
    Client for the GitHub REST API implementing the branch, file and
    pull-request operations the updater needs.

    Every failed request raises ScmRequestError. Nothing is retried.
    """

    def __init__(self, token: str, session: aiohttp.ClientSession, api_url: str = DEFAULT_API_URL):
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "image-hooks",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.session = session
        self.api_url = api_url.rstrip("/")

    async def get_branch_head(self, repo: str, branch: str) -> str:
        data = await self._request("GET", f"/repos/{repo}/git/ref/heads/{quote(branch)}")
        return data["object"]["sha"]

    async def get_file(self, repo: str, path: str, ref: str) -> bytes:
        data = await self._get_contents(repo, path, ref)
        # Files over 1 MB come back with encoding "none" and no content.
        if data.get("encoding") != "base64":
            raise ScmRequestError(
                f"{path} in {repo} at {ref} has no inline content (encoding {data.get('encoding')!r})"
            )
        return base64.b64decode(data.get("content", ""))

    async def create_branch(self, repo: str, name: str, from_sha: str) -> None:
        await self._request(
            "POST", f"/repos/{repo}/git/refs",
            json={"ref": f"refs/heads/{name}", "sha": from_sha},
        )

    async def update_file(self, repo: str, path: str, branch: str, content: bytes, message: str) -> None:
        """
        Commits `content` to `path` on `branch`.

        The blob SHA sent with the PUT is looked up on `branch` just before the
        write, not taken from the earlier read. A commit that lands on `branch`
        between the read and this call is overwritten rather than rejected
        with a 409, so concurrent direct commits to the same file are last
        writer wins.
        """
        current = await self._get_contents(repo, path, branch)
        await self._request(
            "PUT", f"/repos/{repo}/contents/{quote(path)}",
            json={
                "message": message,
                "content": base64.b64encode(content).decode("ascii"),
                "branch": branch,
                "sha": current["sha"],
            },
        )

    async def create_pull_request(self, repo: str, pull_request: PullRequestInput) -> None:
        data = await self._request(
            "POST", f"/repos/{repo}/pulls",
            json=pull_request.model_dump(),
        )
        logger.info(f"Created pull request {data.get('html_url', '')} in {repo}.")

    async def _get_contents(self, repo: str, path: str, ref: str) -> Dict[str, Any]:
        data = await self._request("GET", f"/repos/{repo}/contents/{quote(path)}", params={"ref": ref})
        if not isinstance(data, dict) or data.get("type") != "file":
            raise ScmRequestError(f"{path} in {repo} at {ref} is not a file")
        return data

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{self.api_url}{endpoint}"
        try:
            async with self.session.request(
                method, url, json=json, params=params, headers=self.headers, timeout=REQUEST_TIMEOUT
            ) as response:
                if response.status >= 400:
                    raise ScmRequestError(
                        f"{method} {endpoint} returned {response.status}: {await self._error_message(response)}",
                        status=response.status,
                    )
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ScmRequestError(f"{method} {endpoint} failed: {e}") from e

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        try:
            data = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            return await response.text()
        if isinstance(data, dict):
            return data.get("message", str(data))
        return str(data)
