"""
Test Case Generator API

FastAPI backend that turns uploaded specification documents into structured
test cases with Google Gemini, stores them, and exports selections as CSV.

Usage:
1. Copy .env.example to .env and set GEMINI_API_KEY
2. Install dependencies: pip install -e ".[test]"
3. Run the application: python main.py
4. Access API docs at: http://localhost:5000/api/docs

API Endpoints:
- POST   /api/files/upload              - Upload up to 10 PDF/DOCX/TXT/MD files (field "files")
- GET    /api/files                     - List uploaded files
- DELETE /api/files/{id}                - Delete a file and its stored blob
- POST   /api/test-cases/generate       - Generate test cases from {"fileIds": [...]}
- GET    /api/test-cases?type=&priority= - List test cases ("all" disables a filter)
- GET    /api/test-cases/{id}           - Get test case by ID
- PATCH  /api/test-cases/{id}/select    - Set {"selected": true|false}
- POST   /api/test-cases/export-csv     - CSV of {"testCaseIds": [...]}, one row per step
- GET    /api/health                    - Health check

Architecture Components:

1. Controllers (app/api/routes/):
   - Handle HTTP requests and responses
   - Errors rendered as {"message"} (4xx) or {"message", "error"} (5xx)

2. Services (app/services/):
   - File ingestion (blob storage + metadata validation)
   - Test case generation, filtering, selection and CSV export

3. Repositories (app/repositories/):
   - Storage interface with SQL and in-memory implementations
   - Gemini implementation of the AI service

4. Models (app/models/):
   - Pydantic schemas (camelCase JSON) and SQLAlchemy models

5. Core (app/core/):
   - Database engine, dependency injection, error types

6. Configuration (app/config/):
   - Environment-based settings (STORAGE_BACKEND, UPLOAD_DIR, ...)
"""

__version__ = "1.0.0"
__description__ = "Generate test cases from specification documents"
