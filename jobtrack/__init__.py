"""Job application tracker with OCR assisted fill."""
