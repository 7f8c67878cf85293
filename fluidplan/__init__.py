"""fluidplan: automatic task scheduling and break protection."""
