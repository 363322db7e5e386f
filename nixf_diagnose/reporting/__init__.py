# Terminal rendering of reports.
