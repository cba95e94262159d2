def test_import_wct_package() -> None:
    import importlib

    module = importlib.import_module("wct")
    assert module is not None


def test_import_cli_app() -> None:
    from wct.presentation.cli import app

    assert callable(app.main)


def test_data_package_exports() -> None:
    import wct.data

    assert sorted(wct.data.__all__) == [
        "DataLoadError",
        "DataReferenceError",
        "DataValidationError",
        "get_definitions_path",
    ]
