"""SignalCanvas: place signal flags and pennants on a bounded canvas."""
