"""codec — translation between Python values and CLI text.

- args:   options mappings → argv tokens
- env:    `docker-machine env` output → variable mapping
- lines:  chunked output → complete lines
- events: JSON lines → ComposeEvent records
"""
