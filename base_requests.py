from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class CrowdinModel(BaseModel):
    """Crowdin payloads use camelCase keys."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ==================== QA Check Request Models ====================

class QATranslation(CrowdinModel):
    """A translation submitted for the QA check"""
    id: int = Field(..., description="Translation ID")
    text: str = Field(..., description="Translation text")
    string_id: int = Field(..., alias="stringId", description="Source string ID")


class QALanguage(CrowdinModel):
    id: str = Field(..., description="Language code")
    name: Optional[str] = Field(None, description="Language name")


class QAProject(CrowdinModel):
    id: int = Field(..., description="Project ID")
    name: Optional[str] = Field(None, description="Project name")


class QAFile(CrowdinModel):
    id: int = Field(..., description="File ID")
    name: Optional[str] = Field(None, description="File name")


class QARequestData(CrowdinModel):
    translations: List[QATranslation] = Field(..., description="Translations in this batch")
    target_language: Optional[QALanguage] = Field(None, alias="targetLanguage")
    source_language: Optional[QALanguage] = Field(None, alias="sourceLanguage")
    project: QAProject = Field(..., description="Project the translations belong to")
    file: Optional[QAFile] = Field(None, description="File the translations belong to")


class QARequest(CrowdinModel):
    """External QA check request, as sent by Crowdin"""
    data: QARequestData


# ==================== QA Check Response Models ====================

class QAValidationError(CrowdinModel):
    message: str


class QAValidation(CrowdinModel):
    translation_id: int = Field(..., alias="translationId")
    passed: bool
    error: Optional[QAValidationError] = None


class QAValidationsData(CrowdinModel):
    validations: List[QAValidation]


class QAResponse(CrowdinModel):
    data: QAValidationsData


class BatchSizeData(CrowdinModel):
    size: int


class BatchSizeResponse(CrowdinModel):
    data: BatchSizeData


# ==================== Lifecycle Event Models ====================

class InstalledEvent(CrowdinModel):
    """Body of the ``installed`` webhook"""
    app_id: str = Field(..., alias="appId")
    app_secret: str = Field(..., alias="appSecret")
    client_id: str = Field(..., alias="clientId")
    user_id: int = Field(..., alias="userId")
    organization_id: int = Field(..., alias="organizationId")
    domain: Optional[str] = None
    base_url: str = Field(..., alias="baseUrl")


class UninstallEvent(CrowdinModel):
    """Body of the ``uninstall`` webhook"""
    app_id: str = Field(..., alias="appId")
    app_secret: Optional[str] = Field(None, alias="appSecret")
    client_id: str = Field(..., alias="clientId")
    organization_id: int = Field(..., alias="organizationId")
    domain: Optional[str] = None
    base_url: Optional[str] = Field(None, alias="baseUrl")


class StandardResponse(BaseModel):
    """Standard API response"""
    status: str = Field(..., description="Status of the request: success or error")
    message: str = Field(..., description="Human-readable message")
    data: Optional[Dict[str, Any]] = Field(None, description="Response data")
