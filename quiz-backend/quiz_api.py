"""
Document Quiz API — Main Application
FastAPI application that turns cleaned document text into multiple-choice quizzes.
"""

from dotenv import load_dotenv
load_dotenv()

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import quiz


app = FastAPI(
    title="Document Quiz API",
    description="Rule-based quiz generation from document text: facts, questions, distractors, selection",
    version="1.0.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(quiz.router)               # /quiz/*


@app.get("/")
def root():
    return {
        "name": "Document Quiz API",
        "version": "1.0.0",
        "endpoints": {
            "docs": "/docs",
            "generate": "/quiz/generate",
            "level": "/quiz/level",
        },
    }


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "document-quiz-api",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
