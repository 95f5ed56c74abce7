"""Flutter, policy, code, testing, lint, docs and performance checks."""

from __future__ import annotations

from fsct.checks import testing as testing_checks
from fsct.checks.code import (
    CommentQualityCheck,
    DuplicateCodeCheck,
    FileLengthCheck,
    MethodComplexityCheck,
    NamingConventionCheck,
)
from fsct.checks.docs import LicensePresenceCheck, ReadmeContentCheck, ReadmePresenceCheck
from fsct.checks.flutter import (
    DeprecatedPackageCheck,
    FlutterSdkConstraintCheck,
    MaterialDesignCheck,
    PackageNameCheck,
    ProjectStructureCheck,
    VersionCheck,
)
from fsct.checks.linting import (
    AnalysisOptionsCheck,
    LinterRulesCheck,
    StrongModeCheck,
    StyleGuideCheck,
)
from fsct.checks.perf import ImageOptimizationCheck, ListBuilderCheck
from fsct.checks.policy import LogoutCheck, PrivacyPolicyCheck
from tests._fixtures.project_builder import ProjectBuilder


def _ids(findings):
    return [finding.id for finding in findings]


def test_pubspec_checks_on_a_sloppy_pubspec(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "pubspec.yaml": """
            name: MyApp
            dependencies:
              http: ^1.0.0
              package_info: ^2.0.0
            flutter:
              assets:
                - assets/
            """
        }
    )
    project = project_builder.build()

    assert _ids(FlutterSdkConstraintCheck().run(project)) == ["FLT-001"]
    assert _ids(MaterialDesignCheck().run(project)) == ["FLT-002"]
    assert _ids(PackageNameCheck().run(project)) == ["FLT-004"]
    assert _ids(VersionCheck().run(project)) == ["FLT-005"]
    assert _ids(DeprecatedPackageCheck().run(project)) == ["FLT-007"]
    assert _ids(ProjectStructureCheck().run(project)) == ["FLT-008"]


def test_pubspec_checks_on_a_clean_pubspec(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "pubspec.yaml": """
            name: my_app
            version: 1.2.0+3
            dependencies:
              flutter:
                sdk: flutter
            flutter:
              uses-material-design: true
            """,
            "lib/main.dart": "void main() {}\n",
        }
    )
    project = project_builder.build()

    for check in (
        FlutterSdkConstraintCheck(),
        MaterialDesignCheck(),
        PackageNameCheck(),
        VersionCheck(),
        DeprecatedPackageCheck(),
        ProjectStructureCheck(),
    ):
        assert check.run(project) == [], check.id


def test_policy_keywords(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "lib/settings.dart": """
            const privacyPolicy = 'https://privacy.acme.io';
            Future<void> signOut() async {}
            """
        }
    )
    project = project_builder.build()

    assert PrivacyPolicyCheck().run(project) == []
    assert LogoutCheck().run(project) == []


def test_policy_missing_privacy_policy_is_high(project_builder: ProjectBuilder) -> None:
    project_builder.write({"lib/main.dart": "void main() {}\n"})

    findings = PrivacyPolicyCheck().run(project_builder.build())

    assert [(f.id, f.severity) for f in findings] == [("POL-001", "HIGH")]


def test_long_and_deeply_nested_file(project_builder: ProjectBuilder) -> None:
    body = "".join(f"var v{i} = {i};\n" for i in range(401))
    nested = "void f() {" + "if (a) {" * 5 + "}" * 6 + "\n"
    project_builder.write({"lib/big.dart": body + nested})
    project = project_builder.build()

    assert _ids(FileLengthCheck().run(project)) == ["COD-001"]
    assert _ids(MethodComplexityCheck().run(project)) == ["COD-003"]
    assert _ids(CommentQualityCheck().run(project)) == ["COD-006"]


def test_naming_conventions(project_builder: ProjectBuilder) -> None:
    project_builder.write({"lib/bad.dart": "class widget {}\nfinal Count = 1;\n"})

    findings = NamingConventionCheck().run(project_builder.build())

    assert len(findings) == 2
    assert all(finding.id == "COD-004" for finding in findings)


def test_duplicate_code_between_files(project_builder: ProjectBuilder) -> None:
    block = "".join(f"  total = total + value{i};\n" for i in range(6))
    project_builder.write({"lib/a.dart": block, "lib/b.dart": block})

    findings = DuplicateCodeCheck().run(project_builder.build())

    assert [(f.id, f.file, f.severity) for f in findings] == [("COD-008", "lib/b.dart", "INFO")]
    assert "lib/a.dart:1" in findings[0].message


def test_testing_checks_with_a_small_suite(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "test/widget_test.dart": "void main() { testWidgets('x', (t) async {}); }\n",
            "test/helpers.dart": "class FakeApi extends Mock {}\n",
        }
    )
    project = project_builder.build()

    assert testing_checks.TestDirectoryCheck().run(project) == []
    naming = testing_checks.TestFileNamingCheck().run(project)
    assert [(f.id, f.file) for f in naming] == [("TST-002", "test/helpers.dart")]
    coverage = testing_checks.TestCoverageCheck().run(project)
    assert coverage[0].message == "Low number of test files: 2"
    assert testing_checks.WidgetTestCheck().run(project) == []
    assert testing_checks.MockDependenciesCheck().run(project) == []
    assert _ids(testing_checks.GoldenTestCheck().run(project)) == ["TST-006"]


def test_lint_checks_read_analysis_options(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "analysis_options.yaml": """
            include: package:flutter_lints/flutter.yaml
            linter:
              rules:
                - prefer_const_constructors
            """
        }
    )
    project = project_builder.build()

    assert AnalysisOptionsCheck().run(project) == []
    assert LinterRulesCheck().run(project) == []
    assert StyleGuideCheck().run(project) == []


def test_include_and_language_blocks_do_not_count_as_rules(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "analysis_options.yaml": """
            include: package:flutter_lints/flutter.yaml
            analyzer:
              language:
                strict-casts: true
            """
        }
    )
    project = project_builder.build()

    assert [(f.id, f.severity) for f in LinterRulesCheck().run(project)] == [("LINT-002", "WARNING")]
    assert [(f.id, f.severity) for f in StrongModeCheck().run(project)] == [("LINT-003", "INFO")]


def test_strong_mode_accepts_implicit_casts(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {"analysis_options.yaml": "analyzer:\n  strong-mode:\n    implicit-casts: false\n"}
    )

    assert StrongModeCheck().run(project_builder.build()) == []


def test_docs_checks(project_builder: ProjectBuilder) -> None:
    project_builder.write({"README.md": "# Acme\n\n## Setup\nRun flutter pub get.\n"})
    project = project_builder.build()

    assert ReadmePresenceCheck().run(project) == []
    assert ReadmeContentCheck().run(project) == []
    assert _ids(LicensePresenceCheck().run(project)) == ["DOC-004"]


def test_perf_checks(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "lib/list.dart": """
            Widget build(BuildContext context) {
              return Column(children: [
                for (final item in items) Text(item),
                Image.network(url),
              ]);
            }
            """
        }
    )
    project = project_builder.build()

    assert _ids(ListBuilderCheck().run(project)) == ["PERF-003"]
    assert _ids(ImageOptimizationCheck().run(project)) == ["PERF-004"]
