"""File upload ingestion for filedrop.

Accepts files streamed inside a multipart request, checks each file's real
content type by sniffing its leading bytes, decides the on-disk name and
writes it to a destination directory.

Pipeline per file part:
- sniffer: MIME type from the first 512 bytes
- naming: random 25 character name keeping the extension, or the declared name
- writer: stream to disk, creating the directory if needed
- service: runs the steps in order and aborts on the first failure
"""
