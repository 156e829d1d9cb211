"""HTTP client for the timesheet approval service.

Every call returns an ``ApiResult``. Connection problems and error responses
are reported through ``success``/``error`` and never raised.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .codec import timesheet_to_dict
from .core.logging import get_logger
from .models import PayPeriodTimesheet

logger = get_logger(__name__)

TIMESHEET_STATUSES = ("pending", "approved", "rejected")


@dataclass
class ApiResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


class ApprovalClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApprovalClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> ApiResult:
        if not self.base_url:
            return ApiResult(success=False, error="Server URL not configured")
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = self._client.request(method, path, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("approval_request_failed", method=method, path=path, error=str(exc))
            return ApiResult(success=False, error=str(exc) or exc.__class__.__name__)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_error or body.get("success") is False:
            message = body.get("error") or body.get("detail") or f"Request failed ({response.status_code})"
            logger.info("approval_request_rejected", method=method, path=path, status=response.status_code, error=message)
            return ApiResult(success=False, data=body, error=str(message))
        return ApiResult(success=True, data=body)

    def test_connection(self) -> ApiResult:
        result = self._request("GET", "/api/health")
        if result.success and result.data.get("status") != "ok":
            return ApiResult(success=False, data=result.data, error="Unexpected health response")
        return result

    def list_supervisors(self) -> ApiResult:
        return self._request("GET", "/api/supervisors/list")

    def submit_timesheet(
        self,
        timesheet: PayPeriodTimesheet,
        supervisor_id: Optional[int] = None,
        employee_signature: Optional[str] = None,
        employee_signature_date: Optional[str] = None,
    ) -> ApiResult:
        payload = {
            "employeeName": timesheet.employee_name,
            "payPeriod": timesheet.pay_period_label,
            "timesheetData": timesheet_to_dict(timesheet),
            "supervisorId": supervisor_id,
            "employeeSignature": employee_signature,
            "employeeSignatureDate": employee_signature_date,
        }
        result = self._request("POST", "/api/timesheets/submit", payload)
        if result.success:
            logger.info("timesheet_submitted", period=timesheet.pay_period_label, id=result.data.get("id"))
        return result

    def login(self, username: str, password: str) -> ApiResult:
        result = self._request("POST", "/api/auth/login", {"username": username, "password": password})
        if result.success and result.data.get("token"):
            self.token = result.data["token"]
        return result

    def logout(self) -> ApiResult:
        result = self._request("POST", "/api/auth/logout")
        if result.success:
            self.token = None
        return result

    def list_timesheets(self, status: str = "pending") -> ApiResult:
        if status not in TIMESHEET_STATUSES:
            return ApiResult(success=False, error=f"Unknown status {status!r}")
        return self._request("GET", f"/api/timesheets/{status}")

    def get_timesheet(self, timesheet_id: int) -> ApiResult:
        return self._request("GET", f"/api/timesheets/{timesheet_id}")

    def approve(self, timesheet_id: int, signature: str, signature_date: str) -> ApiResult:
        payload = {"supervisorSignature": signature, "supervisorSignatureDate": signature_date}
        return self._request("POST", f"/api/timesheets/{timesheet_id}/approve", payload)

    def reject(self, timesheet_id: int, reason: str) -> ApiResult:
        return self._request("POST", f"/api/timesheets/{timesheet_id}/reject", {"reason": reason})

    def delete(self, timesheet_id: int) -> ApiResult:
        return self._request("DELETE", f"/api/timesheets/{timesheet_id}")
