from datetime import datetime


def serialize_document(document):
    """Mongo document to a JSON-safe dict with ``id`` in place of ``_id``"""
    serialized = {'id': str(document['_id'])}
    for key, value in document.items():
        if key == '_id':
            continue
        serialized[key] = value.isoformat() if isinstance(value, datetime) else value
    return serialized
