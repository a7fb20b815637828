"""
SQL Playground - Web API

Thin HTTP layer: datasets, saved queries, custom tables and the AI
assistant endpoints. Queries themselves run in the client's embedded
database, never here.
"""

import logging
from datetime import datetime
from typing import Optional

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask.json.provider import DefaultJSONProvider

from sqlplayground.config import PlaygroundConfig, create_default_config
from sqlplayground.core.schema_model import (
    InsertCustomTable,
    InsertSavedQuery,
    SchemaValidationError,
)
from sqlplayground.core.store import MemStorage, build_storage
from sqlplayground.inference.assistant import SQLAssistant, create_assistant

logger = logging.getLogger(__name__)


class PlaygroundJSONProvider(DefaultJSONProvider):
    """Serializes model objects through their camelCase to_dict()."""

    def default(self, obj):
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, (bytes, bytearray)):
            return bytes(obj).hex()
        return super().default(obj)


def _parse_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _required_text(payload, key: str) -> Optional[str]:
    value = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def create_app(
    config: Optional[PlaygroundConfig] = None,
    storage: Optional[MemStorage] = None,
    assistant: Optional[SQLAssistant] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Playground configuration
        storage: Store backing the CRUD endpoints
        assistant: AI capability; chosen from config.llm when omitted
    """
    config = config or create_default_config()
    storage = storage or build_storage(config)
    assistant = assistant or create_assistant(config.llm)

    app = Flask(__name__)
    app.json_provider_class = PlaygroundJSONProvider
    app.json = PlaygroundJSONProvider(app)
    app.json.sort_keys = False
    app.config["STORAGE"] = storage
    app.config["ASSISTANT"] = assistant
    CORS(app)

    # Error handlers to always return JSON for API routes
    @app.errorhandler(400)
    def bad_request(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Bad request', 'details': str(e)}), 400
        return e

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return e

    @app.errorhandler(500)
    def server_error(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error', 'details': str(e)}), 500
        return e

    @app.route('/healthz')
    def health():
        return jsonify({'status': 'ok'})

    # ------------------------------------------------------------------
    # Datasets
    # ------------------------------------------------------------------

    @app.route('/api/datasets', methods=['GET'])
    def list_datasets():
        return jsonify(storage.get_datasets())

    @app.route('/api/datasets/<dataset_id>', methods=['GET'])
    def get_dataset(dataset_id):
        parsed = _parse_id(dataset_id)
        if parsed is None:
            return jsonify({'error': 'Invalid dataset ID'}), 400

        dataset = storage.get_dataset(parsed)
        if not dataset:
            return jsonify({'error': 'Dataset not found'}), 404
        return jsonify(dataset)

    # ------------------------------------------------------------------
    # Saved queries
    # ------------------------------------------------------------------

    @app.route('/api/saved-queries', methods=['GET'])
    def list_saved_queries():
        return jsonify(storage.get_saved_queries())

    @app.route('/api/saved-queries/<query_id>', methods=['GET'])
    def get_saved_query(query_id):
        parsed = _parse_id(query_id)
        if parsed is None:
            return jsonify({'error': 'Invalid query ID'}), 400

        query = storage.get_saved_query(parsed)
        if not query:
            return jsonify({'error': 'Saved query not found'}), 404
        return jsonify(query)

    @app.route('/api/saved-queries', methods=['POST'])
    def create_saved_query():
        try:
            insert = InsertSavedQuery.from_payload(request.get_json(silent=True))
        except SchemaValidationError as e:
            return jsonify({'error': e.message, 'errors': e.errors}), 400

        query = storage.create_saved_query(insert)
        logger.info(f"Saved query #{query.id}: {query.name}")
        return jsonify(query), 201

    # ------------------------------------------------------------------
    # Custom tables
    # ------------------------------------------------------------------

    @app.route('/api/custom-tables', methods=['GET'])
    def list_custom_tables():
        return jsonify(storage.get_custom_tables())

    @app.route('/api/custom-tables', methods=['POST'])
    def create_custom_table():
        try:
            insert = InsertCustomTable.from_payload(request.get_json(silent=True))
        except SchemaValidationError as e:
            return jsonify({'error': e.message, 'errors': e.errors}), 400

        table = storage.create_custom_table(insert)
        logger.info(f"Created custom table #{table.id}: {table.name}")
        return jsonify(table), 201

    # ------------------------------------------------------------------
    # AI assistant
    # ------------------------------------------------------------------

    @app.route('/api/ai/suggest', methods=['POST'])
    def ai_suggest():
        sql = _required_text(request.get_json(silent=True), 'sql')
        if sql is None:
            return jsonify({'error': 'SQL query is required'}), 400

        try:
            suggestion = assistant.suggest(sql)
        except Exception as e:
            logger.error(f"AI suggestion error: {e}")
            return jsonify({'error': 'Failed to get AI suggestions'}), 500
        return jsonify(suggestion)

    @app.route('/api/ai/generate', methods=['POST'])
    def ai_generate():
        payload = request.get_json(silent=True)
        description = _required_text(payload, 'description')
        if description is None:
            return jsonify({'error': 'Description is required'}), 400

        tables = payload.get('tables')
        if not isinstance(tables, list) or not all(isinstance(t, str) for t in tables):
            tables = None

        try:
            sql = assistant.generate(description, tables)
        except Exception as e:
            logger.error(f"AI generation error: {e}")
            return jsonify({'error': 'Failed to generate SQL query'}), 500
        return jsonify({'sql': sql})

    @app.route('/api/ai/explain', methods=['POST'])
    def ai_explain():
        sql = _required_text(request.get_json(silent=True), 'sql')
        if sql is None:
            return jsonify({'error': 'SQL query is required'}), 400

        try:
            explanation = assistant.explain(sql)
        except Exception as e:
            logger.error(f"AI explanation error: {e}")
            return jsonify({'error': 'Failed to explain SQL query'}), 500
        return jsonify({'explanation': explanation})

    return app
