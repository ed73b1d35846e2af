"""OctoPrint REST client.

Reads printer state, the current job, stored files and the webcam stream
URL, and sends job commands. Authentication is the per-printer API key in
the ``X-Api-Key`` header.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from printtrack.config import get_settings
from printtrack.errors import OctoPrintError, OctoPrintNotConfigured, ValidationError
from printtrack.utils import get_logger

logger = get_logger("octoprint")

OFFLINE = "Offline"


def _num(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


@dataclass
class PrinterState:
    """Printer connection state and temperatures."""
    state: str
    tool_actual: Optional[float] = None
    tool_target: Optional[float] = None
    bed_actual: Optional[float] = None
    bed_target: Optional[float] = None

    @property
    def is_offline(self) -> bool:
        return self.state == OFFLINE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "state": self.state,
            "tool_actual": self.tool_actual,
            "tool_target": self.tool_target,
            "bed_actual": self.bed_actual,
            "bed_target": self.bed_target,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PrinterState":
        """Create from an /api/printer response."""
        temps = data.get("temperature") or {}
        tool = temps.get("tool0") or {}
        bed = temps.get("bed") or {}
        return cls(
            state=(data.get("state") or {}).get("text") or "Unknown",
            tool_actual=_num(tool.get("actual")),
            tool_target=_num(tool.get("target")),
            bed_actual=_num(bed.get("actual")),
            bed_target=_num(bed.get("target")),
        )


@dataclass
class JobProgress:
    """Current job as reported by /api/job."""
    state: str
    file_name: Optional[str] = None
    completion: Optional[float] = None
    print_time_left: Optional[float] = None  # seconds

    @property
    def time_left_minutes(self) -> Optional[int]:
        if self.print_time_left is None:
            return None
        return round(self.print_time_left / 60)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "state": self.state,
            "file_name": self.file_name,
            "completion": round(self.completion, 1) if self.completion is not None else None,
            "print_time_left": self.print_time_left,
            "time_left_minutes": self.time_left_minutes,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "JobProgress":
        """Create from an /api/job response."""
        job = data.get("job") or {}
        progress = data.get("progress") or {}
        return cls(
            state=data.get("state") or "Unknown",
            file_name=(job.get("file") or {}).get("name"),
            completion=_num(progress.get("completion")),
            print_time_left=_num(progress.get("printTimeLeft")),
        )


@dataclass
class OctoPrintStatus:
    """
    Combined view of one OctoPrint instance.

    Sections that failed to load are None and their error is kept in
    ``errors`` under the section name.
    """
    printer: Optional[PrinterState] = None
    job: Optional[JobProgress] = None
    webcam_url: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def error(self) -> Optional[str]:
        if not self.errors:
            return None
        return "; ".join(f"{section}: {message}" for section, message in self.errors.items())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "printer": self.printer.to_dict() if self.printer else None,
            "job": self.job.to_dict() if self.job else None,
            "webcam_url": self.webcam_url,
            "errors": dict(self.errors),
            "error": self.error,
        }


class OctoPrintClient:
    """
    Client for a single OctoPrint instance.

    API Documentation: https://docs.octoprint.org/en/master/api/
    """

    # Our job commands mapped to OctoPrint's /api/job payloads
    JOB_COMMANDS = {
        "start": {"command": "start"},
        "cancel": {"command": "cancel"},
        "pause": {"command": "pause", "action": "pause"},
        "resume": {"command": "pause", "action": "resume"},
    }

    def __init__(self, url: str, api_key: str, timeout: Optional[float] = None):
        """
        Initialize OctoPrint client.

        Args:
            url: Base URL of the OctoPrint server
            api_key: OctoPrint API key
            timeout: Request timeout in seconds (defaults to settings)
        """
        if not url or not api_key:
            raise OctoPrintNotConfigured("OctoPrint URL and API key are required")
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else get_settings().octoprint_timeout

    @classmethod
    def for_printer(cls, printer, timeout: Optional[float] = None) -> "OctoPrintClient":
        """Build a client from a printer record with an OctoPrint link."""
        if not getattr(printer, "has_octoprint", False):
            raise OctoPrintNotConfigured(f"Printer {printer.name} has no OctoPrint connection")
        return cls(printer.octoprint_url, printer.octoprint_api_key, timeout=timeout)

    def _get_headers(self) -> dict:
        """Get API request headers."""
        return {"X-Api-Key": self.api_key}

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        allow: Tuple[int, ...] = (),
    ) -> Tuple[int, Any]:
        """
        Send a request and decode the JSON body.

        Args:
            method: HTTP method
            path: API path starting with /api
            json: Optional JSON payload
            allow: Error statuses returned to the caller instead of raised

        Returns:
            (status, decoded body or None)
        """
        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.request(
                    method,
                    f"{self.url}{path}",
                    headers=self._get_headers(),
                    json=json,
                ) as response:
                    if response.status in allow:
                        return response.status, None

                    if response.status in (401, 403):
                        raise OctoPrintError("Invalid OctoPrint API key", response.status)

                    if response.status >= 400:
                        text = await response.text()
                        raise OctoPrintError(
                            f"OctoPrint {path} failed: HTTP {response.status} {text[:200]}".strip(),
                            response.status,
                        )

                    if response.status == 204:
                        return response.status, None
                    try:
                        return response.status, await response.json(content_type=None)
                    except ValueError as e:
                        raise OctoPrintError(
                            f"OctoPrint {path} returned invalid JSON", response.status
                        ) from e

        except aiohttp.ClientError as e:
            logger.error(f"OctoPrint connection error ({self.url}): {e}")
            raise OctoPrintError(f"Cannot reach OctoPrint at {self.url}: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error(f"OctoPrint timeout ({self.url})")
            raise OctoPrintError(f"OctoPrint at {self.url} timed out") from e

    async def get_printer_state(self) -> PrinterState:
        """Printer state and temperatures; a 409 means not operational."""
        status, data = await self._request("GET", "/api/printer", allow=(409,))
        if status == 409:
            return PrinterState(state=OFFLINE)
        return PrinterState.from_api(data or {})

    async def get_job(self) -> JobProgress:
        """Current job file, completion and time left."""
        _, data = await self._request("GET", "/api/job")
        return JobProgress.from_api(data or {})

    async def list_files(self) -> List[str]:
        """Names of files stored on the OctoPrint server."""
        _, data = await self._request("GET", "/api/files")
        return [f.get("name") for f in (data or {}).get("files", []) if f.get("name")]

    async def get_webcam_url(self) -> Optional[str]:
        """Webcam stream URL from the OctoPrint settings, if configured."""
        _, data = await self._request("GET", "/api/settings")
        webcam = (data or {}).get("webcam") or {}
        return webcam.get("streamUrl") or webcam.get("stream") or None

    async def send_job_command(self, command: str) -> None:
        """
        Send a job command.

        Args:
            command: start, cancel, pause or resume
        """
        payload = self.JOB_COMMANDS.get(command)
        if payload is None:
            raise ValidationError(
                f"Unknown job command: {command!r} (expected one of {', '.join(self.JOB_COMMANDS)})"
            )
        await self._request("POST", "/api/job", json=payload)
        logger.info(f"OctoPrint {self.url}: sent job command {command}")

    async def get_status(self) -> OctoPrintStatus:
        """Printer state, job and webcam fetched concurrently; errors kept per section."""
        printer, job, webcam = await asyncio.gather(
            self.get_printer_state(),
            self.get_job(),
            self.get_webcam_url(),
            return_exceptions=True,
        )

        status = OctoPrintStatus()
        for section, result in (("printer", printer), ("job", job), ("webcam", webcam)):
            if isinstance(result, OctoPrintError):
                status.errors[section] = str(result)
            elif isinstance(result, BaseException):
                raise result

        if not isinstance(printer, BaseException):
            status.printer = printer
        if not isinstance(job, BaseException):
            status.job = job
        if not isinstance(webcam, BaseException):
            status.webcam_url = webcam
        return status
