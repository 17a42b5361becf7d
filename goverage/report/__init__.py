"""HTML coverage report: coverage figures, highlighted sources, page rendering and the report writer."""