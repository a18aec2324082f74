"""Foundation layer: errors, Result monad, configuration."""
