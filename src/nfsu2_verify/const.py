ERRORS = {
  "E_LAYOUT_MISSING": "Save file missing",
  "E_READ": "Save file cannot be read in full",
  "E_MAGIC": "Save file missing 20CM magic bytes",
  "E_SIZE_FIELD": "Embedded size field does not match file size",
  "E_TRUNCATED": "Field lies outside the save buffer",
}
