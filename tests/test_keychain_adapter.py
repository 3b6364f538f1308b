"""Parsing ``security find-identity`` output and driving the tool."""

from __future__ import annotations

from pathlib import Path

import pytest

from macsign.app.adapters import SecurityIdentityStore, parse_find_identity_output
from macsign.app.ports import IdentityStoreError, ProcessResult


ACME = "0123456789ABCDEF0123456789ABCDEF01234567"
ZCORP = "89ABCDEF0123456789ABCDEF0123456789ABCDEF"
EXPIRED = "FEDCBA9876543210FEDCBA9876543210FEDCBA98"

VALID_ONLY_OUTPUT = f"""\
  1) {ACME} "Developer ID Application: Acme (AAA111)"
  2) {ZCORP} "Apple Development: dev@zcorp.example (ZZZ111)"
     2 valid identities found
"""

FULL_OUTPUT = f"""\

Policy: Code Signing
  Matching identities
  1) {ACME} "Developer ID Application: Acme (AAA111)"
  2) {EXPIRED} "Developer ID Application: Old (OLD111)" (CSSMERR_TP_CERT_EXPIRED)
     2 identities found

  Valid identities only
  1) {ACME} "Developer ID Application: Acme (AAA111)"
     1 valid identities found
"""


def test_parse_valid_only_listing() -> None:
    records = parse_find_identity_output(VALID_ONLY_OUTPUT)

    assert [(r.reference, r.label) for r in records] == [
        (ACME, "Developer ID Application: Acme (AAA111)"),
        (ZCORP, "Apple Development: dev@zcorp.example (ZZZ111)"),
    ]


def test_parse_full_listing_keeps_requested_section() -> None:
    valid = parse_find_identity_output(FULL_OUTPUT, valid_only=True)
    matching = parse_find_identity_output(FULL_OUTPUT, valid_only=False)

    assert [r.reference for r in valid] == [ACME]
    assert [r.label for r in matching] == [
        "Developer ID Application: Acme (AAA111)",
        "Developer ID Application: Old (OLD111)",
    ]


def test_parse_line_without_label_yields_unlabelled_record() -> None:
    records = parse_find_identity_output(f"  1) {ACME.lower()}\n     1 valid identities found\n")

    assert len(records) == 1
    assert records[0].reference == ACME
    assert records[0].label is None


def test_parse_empty_listing() -> None:
    assert parse_find_identity_output("     0 valid identities found\n") == []


def test_store_invokes_security_with_codesigning_policy(make_runner) -> None:
    runner = make_runner(ProcessResult(exit_code=0, output=VALID_ONLY_OUTPUT.encode()))
    store = SecurityIdentityStore(
        runner,
        security_path=Path("/usr/bin/security"),
        keychain=Path("/tmp/build.keychain-db"),
    )

    records = store.list_signing_identities()

    assert len(records) == 2
    assert runner.calls == [
        (
            Path("/usr/bin/security"),
            ["find-identity", "-v", "-p", "codesigning", "/tmp/build.keychain-db"],
        )
    ]


def test_store_without_valid_only_omits_flag(make_runner) -> None:
    runner = make_runner(ProcessResult(exit_code=0, output=FULL_OUTPUT.encode()))

    records = SecurityIdentityStore(runner, valid_only=False).list_signing_identities()

    assert runner.calls[0][1] == ["find-identity", "-p", "codesigning"]
    assert len(records) == 2


def test_store_raises_on_non_zero_exit(make_runner) -> None:
    runner = make_runner(
        ProcessResult(exit_code=50, output=b"security: SecKeychainCopySearchList: denied\n")
    )

    with pytest.raises(IdentityStoreError, match="denied"):
        SecurityIdentityStore(runner).list_signing_identities()


def test_store_raises_when_security_cannot_launch(make_runner) -> None:
    runner = make_runner(launch_error=FileNotFoundError(2, "No such file or directory"))

    with pytest.raises(IdentityStoreError, match="Cannot query keychain"):
        SecurityIdentityStore(runner).list_signing_identities()
