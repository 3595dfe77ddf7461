"""
String Metadata Client
Fetches per-string width constraints through the app's strings endpoint
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

import httpx

from qa.models import StringConstraint

logger = logging.getLogger(__name__)

FieldPath = Tuple[str, ...]


class ConstraintParser:
    """
    Reads a StringConstraint out of a Crowdin string payload.

    Each field is looked up along a prioritized list of paths; the first
    path holding a usable value wins. Custom fields take precedence over
    the legacy top-level keys.
    """

    MAX_WIDTH_PATHS: Sequence[FieldPath] = (("fields", "widthpx"), ("MaxWidthPixel",))
    FONT_PATHS: Sequence[FieldPath] = (("fields", "font"), ("Font",))
    FONT_SIZE_PATHS: Sequence[FieldPath] = (
        ("fields", "fontsize"),
        ("fields", "fontSize"),
        ("FontSize",),
    )

    def __init__(self, default_font: str = "Arial", default_font_size: int = 16):
        self.default_font = default_font
        self.default_font_size = default_font_size

    def parse(self, string_id: int, payload: Any) -> Optional[StringConstraint]:
        """
        Build the constraint for ``string_id``.

        Returns:
            StringConstraint, or None when no maximum width is set
        """
        if not isinstance(payload, dict):
            return None

        max_width = self.first_value(payload, self.MAX_WIDTH_PATHS, self._as_positive_int)
        if max_width is None:
            return None

        font = self.first_value(payload, self.FONT_PATHS, self._as_font_name)
        font_size = self.first_value(payload, self.FONT_SIZE_PATHS, self._as_positive_int)

        return StringConstraint(
            string_id=string_id,
            max_width_pixels=max_width,
            font=font or self.default_font,
            font_size=font_size or self.default_font_size,
        )

    @staticmethod
    def first_value(payload: Dict[str, Any], paths: Sequence[FieldPath], coerce):
        for path in paths:
            node: Any = payload
            for key in path:
                if not isinstance(node, dict) or key not in node:
                    node = None
                    break
                node = node[key]

            value = coerce(node)
            if value is not None:
                return value
        return None

    @staticmethod
    def _as_positive_int(value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None

        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            try:
                value = float(value)
            except ValueError:
                return None

        if isinstance(value, float):
            if not value.is_integer():
                return None
            value = int(value)

        if isinstance(value, int) and value > 0:
            return value
        return None

    @staticmethod
    def _as_font_name(value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        name = value.strip()
        if not name or not name.isprintable():
            return None
        return name


class StringMetadataClient:
    """
    Looks up width constraints for source strings.

    A single attempt is made per string; every failure is reported as
    "no constraint" so that QA checks fail open.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        parser: Optional[ConstraintParser] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.parser = parser or ConstraintParser()
        self.transport = transport

    async def get_constraint(
        self,
        string_id: int,
        project_id: int,
        auth_token: str
    ) -> Optional[StringConstraint]:
        """
        Fetch the constraint of a source string.

        Args:
            string_id: Crowdin source string ID
            project_id: Crowdin project ID
            auth_token: Crowdin JWT forwarded from the QA request

        Returns:
            StringConstraint, or None if it is unset or could not be fetched
        """
        url = f"{self.base_url}/api/strings/{string_id}"
        params = {"jwtToken": auth_token, "projectId": project_id}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)

                if not response.is_success:
                    logger.warning(
                        f"[QA] Failed to fetch string {string_id} metadata: {response.status_code}"
                    )
                    return None

                payload = response.json()

        except httpx.TimeoutException:
            logger.error(f"[QA] Timeout fetching string {string_id} metadata")
            return None
        except Exception as e:
            logger.error(f"[QA] Error fetching string {string_id} metadata: {e}")
            return None

        return self.parser.parse(string_id, payload)
