from object_access_app.presenter.result_table import COLUMNS, ResultTable, build_rows, render_table, sort_rows

__all__ = ["COLUMNS", "ResultTable", "build_rows", "render_table", "sort_rows"]
