"""System prompts for the AI checks and the metadata-driven user prompt."""

from __future__ import annotations

import json
from typing import Dict, List

from .metadata import ComplianceMetadata

MAX_PROMPT_DEPENDENCIES = 10

PERMISSION_JUSTIFICATION_PROMPT = """You are an expert in mobile app privacy and permission compliance.

Analyze the app's permission usage and provide structured feedback.

Respond ONLY with valid JSON in this format:
{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "compliance_score": 0-100,
  "store_readiness": {
    "app_store": true|false,
    "play_store": true|false,
    "reasoning": "brief explanation"
  },
  "insights": [
    {
      "category": "permissions",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed explanation",
      "confidence": "low|medium|high"
    }
  ],
  "suggestions": [
    {
      "priority": 1-5,
      "category": "permissions",
      "issue": "what needs fixing",
      "action": "how to fix it",
      "file_path": "ios/Runner/Info.plist or android/app/src/main/AndroidManifest.xml",
      "code_example": "optional XML/JSON snippet"
    }
  ],
  "reviewer_notes": [
    "notes for app reviewers about permissions"
  ]
}

Guidelines:
- HIGH severity: Missing critical permission descriptions (Camera, Location, Microphone when used)
- WARNING: Missing nice-to-have descriptions or unclear justifications
- INFO: All permissions well-documented
- Score 90-100: All permissions justified with clear descriptions
- Score 70-89: Minor issues with permission documentation
- Score <70: Missing critical permission descriptions

When analyzing, focus on whether the requested permissions are justified by the app's actual functionality."""

POLICY_COMPLIANCE_PROMPT = """You are an expert in app store policy compliance (App Store & Play Store).

Analyze the app's policy compliance and provide structured feedback.

Respond ONLY with valid JSON in this format:
{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "compliance_score": 0-100,
  "store_readiness": {
    "app_store": true|false,
    "play_store": true|false,
    "reasoning": "brief explanation"
  },
  "insights": [
    {
      "category": "policy",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed explanation",
      "confidence": "low|medium|high"
    }
  ],
  "suggestions": [
    {
      "priority": 1-5,
      "category": "policy",
      "issue": "what needs fixing",
      "action": "how to fix it"
    }
  ],
  "reviewer_notes": [
    "policy-related notes for reviewers"
  ]
}

Policy Requirements:
- App Store: Privacy Policy URL required if app collects any data
- Play Store: Privacy Policy required for most apps
- Account Deletion: Required if app has user accounts (App Store)
- Data Safety Section: Required for Play Store
- GDPR/CCPA compliance if applicable

Scoring:
- Score 90-100: All policies in place
- Score 70-89: Minor policy gaps
- Score <70: Missing required policies

Always verify the latest policy requirements as they change frequently."""

DEPENDENCY_RISK_PROMPT = """You are an expert in Flutter/Dart package security and maintenance.

Analyze the app's dependencies and provide structured risk assessment.

Respond ONLY with valid JSON in this format:
{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "compliance_score": 0-100,
  "insights": [
    {
      "category": "dependencies",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed explanation",
      "confidence": "low|medium|high"
    }
  ],
  "suggestions": [
    {
      "priority": 1-5,
      "category": "dependencies",
      "issue": "what needs attention",
      "action": "how to address it"
    }
  ]
}

Risk Factors:
- HIGH: Known vulnerable packages, unmaintained critical dependencies
- WARNING: Outdated packages, packages with many open issues
- INFO: All dependencies up to date and well-maintained

Consider:
- Security vulnerabilities (check for known CVEs)
- Maintenance status (last update, issue response)
- Popularity and community support
- Native code dependencies (increases risk)"""

STORE_GUIDANCE_PROMPT = """You are an expert in App Store and Play Store submission requirements.

Provide platform-specific guidance for app submission.

Respond ONLY with valid JSON in this format:
{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "store_readiness": {
    "app_store": true|false,
    "play_store": true|false,
    "reasoning": "brief explanation"
  },
  "insights": [
    {
      "category": "store",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed explanation",
      "confidence": "low|medium|high"
    }
  ],
  "suggestions": [
    {
      "priority": 1-5,
      "category": "store",
      "issue": "what needs attention",
      "action": "specific guidance",
      "platform": "ios|android|both"
    }
  ]
}

Platform-Specific Considerations:
iOS App Store:
- Human Interface Guidelines compliance
- App Tracking Transparency (if applicable)
- Sign in with Apple (if using social login)
- Minimum iOS version support

Play Store:
- Material Design compliance
- Android App Bundle (AAB) format
- Target API level requirements
- Content rating questionnaire

Provide specific, actionable guidance for each platform."""

REVIEWER_NOTES_PROMPT = """You are an expert in app store reviewer relations and submission best practices.

Generate helpful notes and instructions for app reviewers.

Respond ONLY with valid JSON in this format:
{
  "risk_level": "low|medium|high",
  "confidence": "low|medium|high",
  "insights": [
    {
      "category": "reviewer",
      "severity": "info|warning|high",
      "title": "brief title",
      "description": "detailed explanation"
    }
  ],
  "reviewer_notes": [
    "specific instruction for reviewers"
  ],
  "test_account": {
    "needed": true|false,
    "reason": "why test account is needed",
    "setup_instructions": "how to set up test data"
  },
  "demo_data": [
    "description of demo/test data in app"
  ],
  "special_instructions": [
    "any special steps reviewers need to take"
  ]
}

Reviewer Note Best Practices:
- Be concise but thorough
- Provide clear login credentials if needed
- Explain any non-obvious features
- Mention any external hardware/API requirements
- Include demo video link if helpful

Common Reviewer Needs:
- Test account credentials
- How to access premium/paid features
- Location-specific functionality
- QR codes or special setup required

Be specific and actionable in your recommendations."""

SYSTEM_PROMPTS: Dict[str, str] = {
    "AI-001": PERMISSION_JUSTIFICATION_PROMPT,
    "AI-002": POLICY_COMPLIANCE_PROMPT,
    "AI-003": DEPENDENCY_RISK_PROMPT,
    "AI-004": STORE_GUIDANCE_PROMPT,
    "AI-005": REVIEWER_NOTES_PROMPT,
}


def system_prompt_for(check_id: str) -> str:
    """Return the system prompt for ``check_id``; unknown ids get the permission prompt."""
    return SYSTEM_PROMPTS.get(check_id, PERMISSION_JUSTIFICATION_PROMPT)


def build_user_prompt(check_name: str, metadata: ComplianceMetadata) -> str:
    lines: List[str] = [f"# {check_name} Analysis Request", "", "## App Information"]
    lines.append(f"- Name: {metadata.app_name}")
    lines.append(f"- Version: {metadata.version}")
    if metadata.description:
        lines.append(f"- Description: {metadata.description}")
    lines.append(f"- Compliance Score: {metadata.compliance_score}/100")
    if metadata.total_checks:
        lines.append(f"- Checks Passed: {metadata.passed_checks}/{metadata.total_checks}")
    lines.append("")

    lines.append("## Current Findings")
    if metadata.findings:
        for finding in metadata.findings:
            lines.append(f"- [{finding.severity}] {finding.id}: {finding.title} ({finding.category})")
    else:
        lines.append("- No findings detected")
    lines.append("")

    lines.append("## Platform Configuration")
    lines.append(f"- Android Target SDK: {metadata.android_target_sdk}")
    lines.append(f"- Android Min SDK: {metadata.android_min_sdk}")
    if metadata.ios_deployment_target:
        lines.append(f"- iOS Deployment Target: {metadata.ios_deployment_target}")
    lines.append("")

    if metadata.android_permissions or metadata.ios_permissions:
        lines.append("## Permissions")
        if metadata.android_permissions:
            lines.append(f"- Android: {', '.join(metadata.android_permissions)}")
        if metadata.ios_permissions:
            lines.append(f"- iOS: {', '.join(metadata.ios_permissions)}")
        lines.append("")

    if metadata.dependencies:
        lines.append("## Key Dependencies")
        lines.append(f"- {', '.join(metadata.dependencies[:MAX_PROMPT_DEPENDENCIES])}")
        lines.append("")

    features = metadata.features
    lines.append("## Feature Flags")
    lines.append(f"- Has Login: {_flag(features.has_login)}")
    lines.append(f"- Has Camera: {_flag(features.has_camera)}")
    lines.append(f"- Has Location: {_flag(features.has_location)}")
    lines.append(f"- Has In-App Purchase: {_flag(features.has_in_app_purchase)}")
    lines.append("")

    security = metadata.security
    lines.append("## Security Configuration")
    lines.append(f"- Debuggable: {_flag(security.is_debuggable)}")
    lines.append(f"- Allows Backup: {_flag(security.allows_backup)}")
    lines.append(f"- Has Insecure HTTP: {_flag(security.has_insecure_http)}")
    lines.append("")

    lines.append("---")
    lines.append("Please analyze this app and provide your assessment in the requested JSON format.")
    return "\n".join(lines)


def format_error_response(error: BaseException) -> str:
    """Render ``error`` as a response body the tolerant parser can consume."""
    payload = {
        "risk_level": "medium",
        "confidence": "low",
        "error": str(error),
        "insights": [],
        "suggestions": [],
    }
    return json.dumps(payload, indent=2)


def _flag(value: bool) -> str:
    return "true" if value else "false"


__all__ = [
    "SYSTEM_PROMPTS",
    "build_user_prompt",
    "format_error_response",
    "system_prompt_for",
]
