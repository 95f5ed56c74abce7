from __future__ import annotations

from fsct.checks.android import (
    ANDROID_CHECKS,
    AllowBackupCheck,
    ApplicationIdCheck,
    DangerousPermissionsCheck,
    DebuggableCheck,
    ExportedAttributeCheck,
    InternetPermissionCheck,
    MissingAppIconCheck,
    PackageVisibilityCheck,
    PlaceholderIconCheck,
    VersionCodeCheck,
)
from fsct.filters import FindingFilter
from fsct.project import MANIFEST_PATH
from tests._fixtures.project_builder import ProjectBuilder, manifest_xml

ICON = "android/app/src/main/res/mipmap-hdpi/ic_launcher.png"
MANIFEST_NO_BACKUP = 'android:allowBackup="false"'


def _run_all(project):
    findings = []
    for factory in ANDROID_CHECKS:
        findings.extend(factory().run(project))
    return findings


def _android_project(project_builder: ProjectBuilder, manifest: str, gradle: str = ""):
    project_builder.write({MANIFEST_PATH: manifest})
    if gradle:
        project_builder.write({"android/app/build.gradle": gradle})
    project_builder.write_bytes(ICON, b"custom icon bytes")
    return project_builder.build()


def test_debuggable_manifest_yields_exactly_one_high_finding(project_builder: ProjectBuilder) -> None:
    project = _android_project(
        project_builder,
        manifest_xml(f'android:debuggable="true" {MANIFEST_NO_BACKUP}'),
    )

    findings = _run_all(project)

    assert [(f.id, f.severity) for f in findings] == [("AND-005", "HIGH")]
    assert findings[0].file == MANIFEST_PATH


def test_low_target_sdk_yields_single_high_finding_kept_by_severity_filters(
    project_builder: ProjectBuilder,
) -> None:
    project = _android_project(
        project_builder,
        manifest_xml(MANIFEST_NO_BACKUP),
        gradle="""
        android {
            defaultConfig {
                applicationId "com.acme.app"
                minSdkVersion 21
                targetSdkVersion 31
                versionCode 4
                versionName "1.3.0"
            }
        }
        """,
    )

    findings = _run_all(project)

    assert [(f.id, f.severity) for f in findings] == [("AND-001", "HIGH")]
    assert "31" in findings[0].message
    assert findings[0].file == "android/app/build.gradle"
    assert FindingFilter.from_options(severity="high").apply(findings) == findings
    assert FindingFilter.from_options(severity="warning").apply(findings) == findings


def test_allow_backup_fires_when_attribute_is_absent(project_builder: ProjectBuilder) -> None:
    project = _android_project(project_builder, manifest_xml())

    findings = AllowBackupCheck().run(project)

    assert [f.id for f in findings] == ["AND-012"]
    assert findings[0].severity == "WARNING"


def test_debuggable_false_is_clean(project_builder: ProjectBuilder) -> None:
    project = _android_project(project_builder, manifest_xml('android:debuggable="false"'))

    assert DebuggableCheck().run(project) == []


def test_network_dependency_without_internet_permission(project_builder: ProjectBuilder) -> None:
    project_builder.write({"pubspec.yaml": "name: shop\ndependencies:\n  dio: ^5.0.0\n"})
    project = _android_project(project_builder, manifest_xml(MANIFEST_NO_BACKUP))

    findings = InternetPermissionCheck().run(project)

    assert [f.id for f in findings] == ["AND-003"]


def test_internet_permission_satisfies_network_dependency(project_builder: ProjectBuilder) -> None:
    project_builder.write({"pubspec.yaml": "name: shop\ndependencies:\n  http: ^1.0.0\n"})
    project = _android_project(
        project_builder,
        manifest_xml(
            MANIFEST_NO_BACKUP,
            body='  <uses-permission android:name="android.permission.INTERNET" />',
        ),
    )

    assert InternetPermissionCheck().run(project) == []


def test_dangerous_permission_without_feature(project_builder: ProjectBuilder) -> None:
    project = _android_project(
        project_builder,
        manifest_xml(
            MANIFEST_NO_BACKUP,
            body=(
                '  <uses-permission android:name="android.permission.CAMERA" />\n'
                '  <uses-permission android:name="android.permission.RECORD_AUDIO" />\n'
                '  <uses-feature android:name="android.hardware.microphone" />'
            ),
        ),
    )

    findings = DangerousPermissionsCheck().run(project)

    assert len(findings) == 1
    assert "CAMERA" in findings[0].message
    assert "android.hardware.camera" in findings[0].suggestion


def test_activity_with_intent_filter_must_set_exported(project_builder: ProjectBuilder) -> None:
    manifest = (
        '<manifest xmlns:android="http://schemas.android.com/apk/res/android">\n'
        "  <application>\n"
        '    <activity android:name=".MainActivity">\n'
        "      <intent-filter><action android:name=\"android.intent.action.MAIN\" /></intent-filter>\n"
        "    </activity>\n"
        '    <activity android:name=".Deep" android:exported="false">\n'
        "      <intent-filter />\n"
        "    </activity>\n"
        "  </application>\n"
        "</manifest>\n"
    )
    project = _android_project(project_builder, manifest)

    findings = ExportedAttributeCheck().run(project)

    assert len(findings) == 1
    assert ".MainActivity" in findings[0].message


def test_missing_launcher_icon(project_builder: ProjectBuilder) -> None:
    project_builder.write({MANIFEST_PATH: manifest_xml(MANIFEST_NO_BACKUP)})
    project = project_builder.build()

    findings = MissingAppIconCheck().run(project)

    assert [f.id for f in findings] == ["AND-007"]


def test_default_flutter_icon_is_reported(project_builder: ProjectBuilder) -> None:
    project_builder.write({MANIFEST_PATH: manifest_xml(MANIFEST_NO_BACKUP)})
    png = b"\x89PNG\r\n\x1a\n"
    project_builder.write_bytes(ICON, png + b"\0" * (544 - len(png)))
    project = project_builder.build()

    findings = PlaceholderIconCheck().run(project)

    assert [f.id for f in findings] == ["AND-008"]
    assert findings[0].file.endswith("mipmap-hdpi/ic_launcher.png")
    assert MissingAppIconCheck().run(project) == []


def test_example_application_id_and_first_version_code(project_builder: ProjectBuilder) -> None:
    project = _android_project(
        project_builder,
        manifest_xml(MANIFEST_NO_BACKUP),
        gradle="""
        android {
            defaultConfig {
                applicationId "com.example.demo"
                targetSdkVersion 35
                versionCode 1
            }
        }
        """,
    )

    assert [f.id for f in ApplicationIdCheck().run(project)] == ["AND-009"]
    assert [f.id for f in VersionCodeCheck().run(project)] == ["AND-010"]


def test_url_launcher_requires_queries(project_builder: ProjectBuilder) -> None:
    project_builder.write({"pubspec.yaml": "name: shop\ndependencies:\n  url_launcher: ^6.0.0\n"})
    project = _android_project(project_builder, manifest_xml(MANIFEST_NO_BACKUP))

    assert [f.id for f in PackageVisibilityCheck().run(project)] == ["AND-011"]


def test_android_checks_are_silent_without_android_directory(project_builder: ProjectBuilder) -> None:
    project_builder.write({"pubspec.yaml": "name: shop\ndependencies:\n  http: ^1.0.0\n"})
    project = project_builder.build()

    assert _run_all(project) == []
