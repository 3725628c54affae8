from buildmeta.errors import (
    BuildMetaError,
    ErrorCode,
    PathMapperError,
    SummaryError,
    TargetTripleError,
)


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        SummaryError("bad summary"),
        PathMapperError("bad remap"),
        TargetTripleError("bad triple"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.SUMMARY.value,
        ErrorCode.PATH_MAPPING.value,
        ErrorCode.TARGET_TRIPLE.value,
    ]
    assert all(isinstance(error, BuildMetaError) for error in errors)


def test_error_message_includes_code_hint_and_context() -> None:
    error = SummaryError(
        "Build metadata summary does not exist.",
        hint="Archive the build before reusing it.",
        context={"path": "/archive/build-meta.json", "empty": ""},
    )

    assert str(error).splitlines() == [
        "[E_SUMMARY] Build metadata summary does not exist.",
        "Hint: Archive the build before reusing it.",
        "  path: /archive/build-meta.json",
    ]
    assert error.context == {"path": "/archive/build-meta.json", "empty": ""}


def test_error_without_hint_is_a_single_line() -> None:
    error = PathMapperError("bad remap")

    assert error.hint is None
    assert str(error) == "[E_PATH_MAPPING] bad remap"
