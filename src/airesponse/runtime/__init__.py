"""Runtime services shared by the pipeline."""
