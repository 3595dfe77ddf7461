"""
Crowdin App Descriptor

The manifest tells Crowdin how to install and integrate the app:
identifier, name and logo, authentication (client id), lifecycle
webhooks, requested scopes and the registered modules.
"""

from typing import Any, Dict

from config import Settings

LENGTH_CHECKER_URL = "/length-checker"
INSTALLED_EVENT_URL = "/events/installed"
UNINSTALL_EVENT_URL = "/events/uninstall"
QA_RUN_URL = "/api/qa/text-length-check"
QA_BATCH_SIZE_URL = "/api/qa/batch-size"


def build_manifest(settings: Settings) -> Dict[str, Any]:
    return {
        "identifier": settings.CROWDIN_APP_IDENTIFIER,
        "name": settings.CROWDIN_APP_NAME,
        "baseUrl": settings.BASE_URL,
        "logo": "/logo.svg",
        "authentication": {
            "type": "crowdin_app",
            "clientId": settings.CROWDIN_CLIENT_ID,
        },
        "events": {
            "installed": INSTALLED_EVENT_URL,
            "uninstall": UNINSTALL_EVENT_URL,
        },
        "scopes": ["project"],
        "modules": {
            "editor-translations-panel": [
                {
                    "key": "length-checker",
                    "name": "Length Checker",
                    "modes": ["translate", "review"],
                    "url": LENGTH_CHECKER_URL,
                }
            ],
            "editor-right-panel": [
                {
                    "key": "length-checker-right-panel",
                    "name": "Length Checker",
                    "modes": ["translate", "review"],
                    "url": LENGTH_CHECKER_URL,
                }
            ],
            "external-qa-check": [
                {
                    "key": "text-length-qa-check",
                    "name": "Text Length QA Check",
                    "runQaCheckUrl": QA_RUN_URL,
                    "getBatchSizeUrl": QA_BATCH_SIZE_URL,
                }
            ],
        },
    }
