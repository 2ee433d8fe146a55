"""Smoke tests — verify all sheetmap modules import without error."""


def test_sheetmap_modules_import():
    import sheetmap.cell
    import sheetmap.coerce
    import sheetmap.config
    import sheetmap.correlate
    import sheetmap.cursor
    import sheetmap.errors
    import sheetmap.fields
    import sheetmap.locator
    import sheetmap.log
    import sheetmap.models
    import sheetmap.parsing
    import sheetmap.sheet
    import sheetmap.workbook


def test_package_exports():
    import sheetmap

    for name in sheetmap.__all__:
        assert hasattr(sheetmap, name), name
