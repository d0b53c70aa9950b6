"""
Basic brotliware example

Serves a few routes behind the Brotli middleware. Run with:

    uvicorn examples.basic_app.main:app --reload

and try ``curl -H 'Accept-Encoding: br' -i localhost:8000/articles``.
"""
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from brotliware import add_brotli_middleware

app = FastAPI(title="brotliware example", version="0.1.0")


def large_enough(request, status, headers, body) -> bool:
    """Skip tiny bodies, the framing overhead is not worth it."""
    return sum(len(chunk) for chunk in body) > 256


add_brotli_middleware(
    app,
    condition=large_enough,
    include=["text/html", "text/plain", "application/json"],
    deflater={"quality": 7, "mode": "text"},
)


@app.get("/articles")
async def list_articles():
    return [
        {"id": i, "title": f"Article {i}", "body": "Lorem ipsum dolor sit amet. " * 10}
        for i in range(20)
    ]


@app.get("/", response_class=HTMLResponse)
async def index():
    return "<html><body>" + "<p>Hello from brotliware</p>" * 50 + "</body></html>"


@app.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


@app.get("/raw")
async def raw():
    # Proxies must not re-encode this one.
    return Response(
        content="do not touch " * 100,
        media_type="text/plain",
        headers={"Cache-Control": "no-transform"},
    )
