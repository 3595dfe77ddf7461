"""
Crowdin Integration Module

Modules:
- jwt_auth: Extract and verify Crowdin JWTs
- organizations: Installed organizations (lifecycle webhooks)
- auth: Access token issuing and caching
- strings_client: Crowdin source strings API
- manifest: App descriptor
- editor_panel: Length Checker editor panel
- errors: Exception taxonomy
"""
