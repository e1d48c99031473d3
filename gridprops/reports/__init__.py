"""Report generation for GridProps."""
