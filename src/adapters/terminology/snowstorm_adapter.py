"""Snowstorm Terminology Adapter.

HTTP adapter implementing TerminologyPort against a Snowstorm SNOMED CT
terminology server.

Lookup modes:
    - validate-code: FHIR R4 ``POST {base}/fhir/CodeSystem/$validate-code``
      with a Parameters body naming the system and the code. Valid when the
      response is 2xx and its ``result`` parameter is ``valueBoolean: true``.
    - native: Snowstorm browser API ``GET {base}/browser/{branch}/concepts/{code}``.
      Valid when the response is 200 and the concept's ``active`` flag is true.

Snowstorm speaks FHIR R4. Only (system, code) pairs are sent, which are the
same in every FHIR version.

Security Impact:
    - Fail-closed: every failure (non-2xx status, malformed body, timeout,
      connection error) makes a lookup return False, so untrusted codes are
      never accepted because the server was unavailable
    - Every remote call is bounded by the configured timeout
    - No retries: one failed call is a definitive "invalid" for that call
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from src.domain.constants import SNOMED_SYSTEM
from src.domain.enums import TerminologyMode
from src.domain.ports import Result, TerminologyPort
from src.infrastructure.config_manager import TerminologyConfig

logger = logging.getLogger(__name__)

FHIR_JSON = "application/fhir+json"


class SnowstormTerminologyAdapter(TerminologyPort):
    """Terminology lookups against Snowstorm.

    The adapter is stateless apart from its HTTP client, which is thread-safe
    and shared by concurrent validation requests.

    Example Usage:
        ```python
        with SnowstormTerminologyAdapter(TerminologyConfig(base_url="http://localhost:8080")) as snow:
            snow.is_valid("22298006")           # FHIR $validate-code
            snow.exists_and_active("22298006")  # browser API
            snow.lookup("22298006")             # configured mode
        ```
    """

    def __init__(
        self,
        config: TerminologyConfig,
        system: str = SNOMED_SYSTEM,
        client: Optional[httpx.Client] = None
    ):
        """Initialize the adapter.

        Parameters:
            config: Terminology connection settings
            system: Coding-system URI sent with validate-code requests
            client: Optional pre-built HTTP client (tests pass one with a mock
                transport); the adapter closes only clients it created
        """
        self.config = config
        self.system = system
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout_seconds)

    # ------------------------------------------------------------------
    # TerminologyPort
    # ------------------------------------------------------------------
    def is_valid(self, code: str) -> bool:
        return self._collapse(self.check_code(code), "$validate-code", code)

    def exists_and_active(self, code: str) -> bool:
        return self._collapse(self.check_concept(code), "native check", code)

    def lookup(self, code: str) -> bool:
        if self.config.mode is TerminologyMode.NATIVE:
            return self.exists_and_active(code)
        return self.is_valid(code)

    # ------------------------------------------------------------------
    # Detailed lookups
    # ------------------------------------------------------------------
    def check_code(self, code: str) -> Result[bool]:
        """Call ``CodeSystem/$validate-code`` for a code.

        Parameters:
            code: Code to validate

        Returns:
            Result[bool]: Success with the server's verdict, or failure
                describing why no verdict could be obtained
        """
        url = f"{self.config.base_url}/fhir/CodeSystem/$validate-code"
        body = {
            "resourceType": "Parameters",
            "parameter": [
                {"name": "url", "valueUri": self.system},
                {"name": "code", "valueCode": code},
            ],
        }
        try:
            logger.debug(f"Snowstorm $validate-code -> {url}")
            response = self._client.post(
                url,
                json=body,
                headers={"Content-Type": FHIR_JSON, "Accept": FHIR_JSON},
                timeout=self.config.timeout_seconds,
            )
            logger.debug(f"Snowstorm $validate-code status={response.status_code}")
            if not response.is_success:
                return Result.failure_result(
                    f"HTTP {response.status_code}",
                    error_type="HTTPStatusError",
                    error_details={"code": code, "status_code": response.status_code, "url": url},
                )
            return Result.success_result(_parameters_result(response.json()))
        except Exception as e:
            # Any failure here is a lookup failure, never an error for the caller
            return Result.failure_result(e, error_details={"code": code, "url": url})

    def check_concept(self, code: str) -> Result[bool]:
        """Fetch a concept from the browser API and read its ``active`` flag.

        Parameters:
            code: Concept identifier

        Returns:
            Result[bool]: Success with True only if the concept is explicitly
                active, or failure describing why no answer could be obtained
        """
        url = f"{self.config.base_url}/browser/{self.config.branch}/concepts/{quote(code, safe='')}"
        try:
            logger.debug(f"Snowstorm native check -> {url}")
            response = self._client.get(
                url,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout_seconds,
            )
            if response.status_code != 200:
                return Result.failure_result(
                    f"HTTP {response.status_code}",
                    error_type="HTTPStatusError",
                    error_details={"code": code, "status_code": response.status_code, "url": url},
                )
            payload = response.json()
            return Result.success_result(isinstance(payload, dict) and payload.get("active") is True)
        except Exception as e:
            return Result.failure_result(e, error_details={"code": code, "url": url})

    def ping(self) -> Result[float]:
        """Check that the terminology server answers.

        Returns:
            Result[float]: Success with the response time in milliseconds
        """
        url = f"{self.config.base_url}/version"
        try:
            response = self._client.get(url, timeout=self.config.timeout_seconds)
            if not response.is_success:
                return Result.failure_result(f"HTTP {response.status_code}", error_type="HTTPStatusError")
            return Result.success_result(round(response.elapsed.total_seconds() * 1000, 2))
        except Exception as e:
            return Result.failure_result(e)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SnowstormTerminologyAdapter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @staticmethod
    def _collapse(result: Result[bool], operation: str, code: str) -> bool:
        if result.is_success():
            return result.value is True
        logger.warning(f"Snowstorm {operation} failed for {code}: {result.error_type}: {result.error}")
        return False


def _parameters_result(payload: Any) -> bool:
    """Read the ``result`` boolean of a FHIR Parameters resource.

    Raises:
        ValueError: If the payload is not a Parameters resource
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("parameter"), list):
        raise ValueError("Response is not a FHIR Parameters resource")
    for parameter in payload["parameter"]:
        if isinstance(parameter, dict) and parameter.get("name") == "result":
            return parameter.get("valueBoolean") is True
    return False
