from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from starlette.responses import HTMLResponse, Response
import logging

from base_requests import (
    QARequest,
    QAResponse,
    QAValidation,
    QAValidationError,
    QAValidationsData,
    BatchSizeResponse,
    BatchSizeData,
    InstalledEvent,
    UninstallEvent,
    StandardResponse,
)
from config import Settings, get_settings
from crowdin.auth import CrowdinTokenService, TokenCipher
from crowdin.editor_panel import render_length_checker
from crowdin.errors import (
    AuthenticationMissingError,
    InvalidTokenError,
    StringNotFoundError,
    TokenRefreshError,
)
from crowdin.jwt_auth import CrowdinJwtPayload, decode_crowdin_jwt, require_token
from crowdin.manifest import build_manifest
from crowdin.organizations import OrganizationDirectory
from crowdin.strings_client import CrowdinStringsClient, organization_domain_from_base_url
from Database.database import get_db
from qa import (
    BatchQAProcessor,
    ConstraintParser,
    PixelWidthCalculator,
    StringMetadataClient,
    Translation,
)

# Configure logging
logging.basicConfig(level=get_settings().LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create API router for the Crowdin app
api_router = APIRouter(tags=["Crowdin App"])


# ==================== Dependencies ====================

def crowdin_token(request: Request) -> str:
    """Raw Crowdin JWT from the Bearer header or the jwtToken query parameter."""
    try:
        return require_token(request)
    except AuthenticationMissingError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)


def crowdin_context(
    token: str = Depends(crowdin_token),
    settings: Settings = Depends(get_settings),
) -> CrowdinJwtPayload:
    try:
        return decode_crowdin_jwt(token, settings)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)


def get_token_cipher(settings: Settings = Depends(get_settings)) -> TokenCipher:
    return TokenCipher(settings.ENCRYPTION_KEY)


def get_organization_directory(
    db: Session = Depends(get_db),
    cipher: TokenCipher = Depends(get_token_cipher),
) -> OrganizationDirectory:
    return OrganizationDirectory(db, cipher)


def get_token_service(
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
    cipher: TokenCipher = Depends(get_token_cipher),
) -> CrowdinTokenService:
    return CrowdinTokenService(settings, db, cipher)


def get_strings_client_factory():
    return CrowdinStringsClient


def get_string_metadata_client(settings: Settings = Depends(get_settings)) -> StringMetadataClient:
    return StringMetadataClient(
        base_url=settings.BASE_URL,
        timeout=settings.METADATA_TIMEOUT,
        parser=ConstraintParser(settings.DEFAULT_FONT, settings.DEFAULT_FONT_SIZE),
    )


def get_batch_processor(settings: Settings = Depends(get_settings)) -> BatchQAProcessor:
    calculator = PixelWidthCalculator(
        font_dirs=settings.FONT_DIRS,
        default_font=settings.DEFAULT_FONT,
        default_font_size=settings.DEFAULT_FONT_SIZE,
    )
    return BatchQAProcessor(
        calculator=calculator,
        concurrency=settings.QA_LOOKUP_CONCURRENCY,
        log=logging.getLogger("qa"),
    )


# ==================== App Descriptor ====================

@api_router.get(
    "/manifest.json",
    summary="Crowdin App Descriptor",
    description="Describes authentication, webhooks and modules of the app"
)
async def get_manifest(settings: Settings = Depends(get_settings)) -> Any:
    return build_manifest(settings)


@api_router.get("/sitemap.xml", include_in_schema=False)
async def get_sitemap(settings: Settings = Depends(get_settings)) -> Response:
    base_url = settings.BASE_URL.rstrip("/")
    today = date.today().isoformat()
    entries = [
        (base_url, "1.0"),
        (f"{base_url}/manifest.json", "0.8"),
        (f"{base_url}/api", "0.5"),
    ]
    urls = "".join(
        f"<url><loc>{loc}</loc><lastmod>{today}</lastmod>"
        f"<changefreq>monthly</changefreq><priority>{priority}</priority></url>"
        for loc, priority in entries
    )
    body = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{urls}</urlset>'
    )
    return Response(content=body, media_type="application/xml")


# ==================== Lifecycle Events ====================

@api_router.post(
    "/events/installed",
    response_model=StandardResponse,
    summary="App Installed Webhook",
    description="Registers the organization that installed the app"
)
async def app_installed(
    event: InstalledEvent,
    settings: Settings = Depends(get_settings),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> StandardResponse:
    if event.client_id != settings.CROWDIN_CLIENT_ID:
        logger.warning(f"[Events] Installed event with unexpected client id for organization {event.organization_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unknown client id")

    try:
        organization = directory.register_installation(event.model_dump(by_alias=True))
        return StandardResponse(
            status="success",
            message="App installed",
            data={"organizationId": organization.organization_id, "domain": organization.domain},
        )
    except Exception as e:
        logger.error(f"[Events] Error handling installed event: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to register installation"
        )


@api_router.post(
    "/events/uninstall",
    response_model=StandardResponse,
    summary="App Uninstalled Webhook",
    description="Removes the organization that uninstalled the app"
)
async def app_uninstalled(
    event: UninstallEvent,
    settings: Settings = Depends(get_settings),
    directory: OrganizationDirectory = Depends(get_organization_directory),
) -> StandardResponse:
    if event.client_id != settings.CROWDIN_CLIENT_ID:
        logger.warning(f"[Events] Uninstall event with unexpected client id for organization {event.organization_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unknown client id")

    try:
        removed = directory.remove_installation(event.model_dump(by_alias=True))
        return StandardResponse(
            status="success",
            message="App uninstalled" if removed else "Organization was not installed",
        )
    except Exception as e:
        logger.error(f"[Events] Error handling uninstall event: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove installation"
        )


# ==================== Editor Panel ====================

@api_router.get("/length-checker", response_class=HTMLResponse, include_in_schema=False)
async def length_checker(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    return HTMLResponse(content=render_length_checker(settings))


# ==================== QA Check Endpoints ====================

@api_router.get(
    "/api/qa/batch-size",
    response_model=BatchSizeResponse,
    summary="QA Check Batch Size",
    description="Number of translations Crowdin sends per QA check call"
)
async def get_batch_size(settings: Settings = Depends(get_settings)) -> BatchSizeResponse:
    return BatchSizeResponse(data=BatchSizeData(size=settings.QA_BATCH_SIZE))


@api_router.post(
    "/api/qa/text-length-check",
    response_model=QAResponse,
    response_model_exclude_none=True,
    summary="Run Text Length QA Check",
    description="Validates translation pixel width against each string's maximum width"
)
async def run_text_length_check(
    qa_request: QARequest,
    token: str = Depends(crowdin_token),
    context: CrowdinJwtPayload = Depends(crowdin_context),
    metadata_client: StringMetadataClient = Depends(get_string_metadata_client),
    processor: BatchQAProcessor = Depends(get_batch_processor),
) -> QAResponse:
    try:
        data = qa_request.data
        project_id = data.project.id
        target_language = data.target_language.id if data.target_language else None

        logger.info(
            f"[QA] Request for project {data.project.name or project_id} "
            f"(organization {context.organization_id})"
        )

        translations = [
            Translation(id=t.id, text=t.text, source_string_id=t.string_id)
            for t in data.translations
        ]

        async def resolve_constraint(string_id: int):
            return await metadata_client.get_constraint(string_id, project_id, token)

        verdicts = await processor.process(translations, resolve_constraint, target_language)

        validations = [
            QAValidation(
                translation_id=v.translation_id,
                passed=v.passed,
                error=QAValidationError(message=v.message) if v.message else None,
            )
            for v in verdicts
        ]
        return QAResponse(data=QAValidationsData(validations=validations))

    except HTTPException as he:
        raise he
    except Exception as e:
        logger.error(f"[QA] Error processing QA check: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


# ==================== Strings ====================

@api_router.get(
    "/api/strings/{string_id}",
    summary="Get Source String",
    description="Fetch a source string, including custom fields, from the Crowdin API"
)
async def get_string(
    string_id: str,
    project_id: Optional[int] = Query(None, alias="projectId"),
    context: CrowdinJwtPayload = Depends(crowdin_context),
    directory: OrganizationDirectory = Depends(get_organization_directory),
    token_service: CrowdinTokenService = Depends(get_token_service),
    strings_client_factory=Depends(get_strings_client_factory),
) -> Any:
    if not string_id.isdigit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid string ID provided."
        )

    project_id = project_id or context.project_id
    if not project_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project ID required."
        )

    organization = directory.find_organization(context.domain, context.organization_id)
    if organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found."
        )

    try:
        access_token = await token_service.get_valid_token(organization)
        client = strings_client_factory(
            access_token,
            organization_domain_from_base_url(organization.base_url),
        )
        return await client.get_string(project_id, int(string_id))

    except (TokenRefreshError, StringNotFoundError) as e:
        logger.warning(f"[Crowdin] String {string_id} lookup failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Error in GET /api/strings/{string_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "An unknown error occurred."
        )
