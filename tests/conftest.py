from relative_gutter.runtime import telemetry

telemetry.configure(preset="silent")
