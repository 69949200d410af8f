"""
OpenRouter-backed phishing analyzer.
- Chat-completions request with a conservative expert persona
- STRICT JSON output expected; markdown fences tolerated
- First balanced JSON object extracted from the reply
- Schema validated; reconciliation and persistence happen in the router
"""

import asyncio
import json
import logging
import math
import re
from typing import Any, Dict, Optional

import requests

from ..config.models import Settings
from .errors import (
    ConfigurationError,
    EmptyResponseError,
    InvalidSchemaError,
    MalformedResponseError,
    TransportError,
)
from .models import AnalysisResult, EmailData

logger = logging.getLogger(__name__)

MAX_BODY_CHARS = 2000
MAX_LINKS = 10
TEMPERATURE = 0.3
MAX_TOKENS = 800

SYSTEM_PROMPT = (
    "You are a cybersecurity expert specializing in phishing detection. You are CONSERVATIVE "
    "and only flag emails as phishing when there are multiple strong indicators. Legitimate "
    "marketing emails, newsletters, and automated emails from real companies should NOT be "
    "flagged as phishing. Respond ONLY with valid JSON. No markdown formatting, no code blocks, "
    "just the raw JSON object."
)

USER_PROMPT_TEMPLATE = """Analyze this email for phishing indicators. Respond ONLY with a valid JSON object in this exact format (no markdown, no backticks):
{{
  "isPhishing": true or false,
  "confidence": number between 0-100,
  "indicators": ["list", "of", "suspicious", "things"],
  "recommendation": "brief recommendation text"
}}

Email Details:
From: {sender}
Subject: {subject}
Body: {body}
Links: {links}

IMPORTANT: Be conservative in flagging legitimate emails. Only flag as phishing if there are MULTIPLE strong indicators:
- Mismatched sender domain (e.g., claims to be "Bank" but from random domain)
- Suspicious/shortened links that don't match claimed sender
- Urgent threats (account closure, legal action, prize expiration)
- Requests for passwords, credit cards, or SSN
- Poor grammar/spelling throughout
- Spoofed/lookalike domains (g00gle.com, paypa1.com)

DO NOT flag as phishing if:
- Email is from a legitimate company domain (anthropic.com, google.com, etc.)
- Links match the sender's domain
- Professional formatting and grammar
- No requests for sensitive information
- Normal marketing/newsletter content

Analyze carefully and be accurate."""

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def build_user_prompt(email: EmailData) -> str:
    """User message for one email, with body and links truncated."""
    return USER_PROMPT_TEMPLATE.format(
        sender=email.from_addr,
        subject=email.subject,
        body=(email.body or "")[:MAX_BODY_CHARS],
        links=", ".join(list(email.links)[:MAX_LINKS]),
    )


class OpenRouterAnalyzer:
    """Remote scanner for chat-completion style endpoints."""

    def __init__(
        self,
        request_timeout: float = 60.0,
        referer: str = "phish-agent",
        title: str = "Phishing Detector",
        session: Optional[requests.Session] = None,
    ):
        self.request_timeout = request_timeout
        self.referer = referer
        self.title = title
        self.session = session or requests.Session()

    async def scan(self, email: EmailData, settings: Settings) -> AnalysisResult:
        """Analyze an email remotely. Returns the validated, unreconciled result."""
        if not settings.api_key:
            raise ConfigurationError("API key not configured. Please set it in the settings.")

        payload = self.build_payload(email, settings)
        data = await asyncio.to_thread(self._post, settings, payload)
        content = self._extract_content(data)
        return self.parse_response(content)

    def build_payload(self, email: EmailData, settings: Settings) -> Dict[str, Any]:
        return {
            "model": settings.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(email)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    def _post(self, settings: Settings, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Low-level call to the chat completions endpoint."""
        headers = {
            "Authorization": f"Bearer {settings.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }

        logger.debug("POST %s (model=%s)", settings.endpoint, settings.model)
        try:
            response = self.session.post(
                settings.endpoint,
                json=payload,
                headers=headers,
                timeout=self.request_timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"API request failed: {e}") from e

        if not response.ok:
            raise TransportError(self._error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError("API returned a non-JSON body") from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error = error_data.get("error") if isinstance(error_data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"API request failed: {response.status_code}"

    @staticmethod
    def _extract_content(data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content or not isinstance(content, str):
            raise EmptyResponseError("No response from API")
        return content

    # ----------------------------
    # Parsing / Validation
    # ----------------------------

    def parse_response(self, content: str) -> AnalysisResult:
        """Turn model text into a validated AnalysisResult."""
        data = self._extract_json_object(content)
        return self._validate(data)

    @staticmethod
    def _strip_fences(text: str) -> str:
        return _FENCE_RE.sub("", text.strip())

    def _extract_json_object(self, text: str) -> Dict[str, Any]:
        """Parse the first balanced ``{...}`` span in the text."""
        candidate = self._first_balanced_object(self._strip_fences(text))
        if candidate is None:
            raise MalformedResponseError("Invalid response format from API. Expected JSON object.")

        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedResponseError("Expected a JSON object")
        return data

    @staticmethod
    def _first_balanced_object(text: str) -> Optional[str]:
        start = text.find("{")
        if start == -1:
            return None

        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        return None

    @staticmethod
    def _validate(data: Dict[str, Any]) -> AnalysisResult:
        is_phishing = data.get("isPhishing")
        confidence = data.get("confidence")
        indicators = data.get("indicators")
        recommendation = data.get("recommendation")

        if not isinstance(is_phishing, bool):
            raise InvalidSchemaError("Invalid response structure from API: isPhishing must be a boolean")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)) or not math.isfinite(confidence):
            raise InvalidSchemaError("Invalid response structure from API: confidence must be a finite number")
        if not isinstance(indicators, list) or not all(isinstance(i, str) for i in indicators):
            raise InvalidSchemaError("Invalid response structure from API: indicators must be a list of strings")
        if not isinstance(recommendation, str):
            raise InvalidSchemaError("Invalid response structure from API: recommendation must be a string")

        return AnalysisResult(
            is_phishing=is_phishing,
            confidence=max(0, min(100, int(round(confidence)))),
            indicators=tuple(indicators),
            recommendation=recommendation,
        )
