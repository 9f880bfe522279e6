from hoshin_compass.export.vbrief import VbriefExportError, build_vbrief_filename, to_vbrief, write_vbrief

__all__ = ["VbriefExportError", "build_vbrief_filename", "to_vbrief", "write_vbrief"]
