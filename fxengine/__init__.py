"""fxengine: offline audio effects processing service."""
