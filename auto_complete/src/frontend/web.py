from __future__ import annotations
import argparse
import base64
import binascii
import logging
from flask import Blueprint, Flask, request, jsonify, Response
from werkzeug.exceptions import HTTPException
from backend.engine import Engine
from backend.errors import InvalidInputError, TranscriptionError
from backend import config as CFG

log = logging.getLogger(__name__)

app = Flask(__name__)
# base64 JSON bodies are ~4/3 the size of the audio
app.config["MAX_CONTENT_LENGTH"] = CFG.MAX_AUDIO_BYTES * 4 // 3 + 64 * 1024
_engine: Engine | None = None

api = Blueprint("api", __name__)

def _session_id() -> str:
    return (
        request.headers.get("X-Session-Id")
        or request.cookies.get("session_id")
        or CFG.DEFAULT_SESSION
    )

def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

# ---------- API ----------
@api.post("/add-character")
def add_character():
    ch = _body().get("character")
    if not isinstance(ch, str) or len(ch) != 1:
        return jsonify({"error": "Character must be a single string character"}), 400
    upd = _engine.add_character(ch, session=_session_id())  # type: ignore
    return jsonify(upd.to_json())

@api.post("/remove-character")
def remove_character():
    upd = _engine.remove_character(session=_session_id())  # type: ignore
    return jsonify(upd.to_json())

@api.post("/process-suggestion")
def process_suggestion():
    suggestion = _body().get("suggestion")
    if not isinstance(suggestion, str) or not suggestion.strip():
        return jsonify({"error": "Suggestion must be a non-empty string"}), 400
    upd = _engine.process_suggestion(suggestion, session=_session_id())  # type: ignore
    return jsonify({"success": True, **upd.to_json()})

@api.get("/current-text")
def current_text():
    upd = _engine.current_text(session=_session_id())  # type: ignore
    return jsonify({"currentText": upd.current_text, "isWordComplete": upd.is_word_complete})

@api.post("/transcribe-audio")
def transcribe_audio():
    # /* ~~~ multipart "audio" file first, JSON {"audio": base64} as fallback ~~~ */
    if request.mimetype == "multipart/form-data":
        f = request.files.get("audio")
        if f is None:
            return jsonify({"error": "No audio file provided"}), 400
        audio = f.read()
        filename, mimetype = f.filename or "audio.wav", f.mimetype or "audio/wav"
    else:
        raw = _body().get("audio")
        if not raw or not isinstance(raw, str):
            return jsonify({"error": "No audio data provided"}), 400
        if "," in raw and raw.startswith("data:"):
            raw = raw.split(",", 1)[1]  # data URL
        try:
            audio = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError):
            return jsonify({"error": "Invalid request format", "details": "audio is not base64"}), 400
        filename, mimetype = "audio.wav", "audio/wav"

    if not audio:
        return jsonify({"error": "No audio file provided"}), 400

    transcript, upd = _engine.transcribe(  # type: ignore
        audio, filename=filename, mimetype=mimetype, session=_session_id()
    )
    body = {
        "transcription": transcript.text,
        "currentText": upd.current_text,
        "suggestions": upd.suggestions,
    }
    if transcript.note:
        body["note"] = transcript.note
    return jsonify(body)

@api.post("/reset")
def reset():
    upd = _engine.reset(session=_session_id())  # type: ignore
    return jsonify(upd.to_json())

@api.get("/health")
def health():
    return jsonify({"ok": True, "status": "OK", "message": "Server is running"})

# served under /api and at the bare paths
app.register_blueprint(api, url_prefix="/api")
app.register_blueprint(api, name="api_root")

# ---------- errors ----------
@app.errorhandler(InvalidInputError)
def _invalid_input(e: InvalidInputError):
    return jsonify({"error": str(e)}), 400

@app.errorhandler(TranscriptionError)
def _transcription_failed(e: TranscriptionError):
    log.error("transcription failed: %s", e)
    return jsonify({"error": "Transcription failed"}), 502

@app.errorhandler(Exception)
def _unhandled(e: Exception):
    if isinstance(e, HTTPException):
        return jsonify({"error": e.description}), e.code
    log.exception("unhandled error on %s %s", request.method, request.path)
    return jsonify({"error": "Internal server error"}), 500

# ---------- UI ----------
@app.get("/")
def home():
    # On-screen keyboard + suggestion list; no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Live Autocomplete</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#6ee7ff; --border:#1c2530; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink); font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Arial; }
.container{ max-width:900px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; }
h1{ font-size:20px; margin:0 0 12px 0 }
#text{ min-height:64px; padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; white-space:pre-wrap; font-size:18px }
.sugg{ display:flex; gap:8px; flex-wrap:wrap; margin:12px 0; min-height:40px }
.btn{ padding:8px 12px; border-radius:10px; border:1px solid var(--border); background:#0b1117; color:var(--ink); cursor:pointer }
.btn:hover{ border-color:var(--accent) }
.kb{ display:grid; gap:6px; margin-top:8px }
.kb .row{ display:flex; gap:6px; justify-content:center }
.kb .btn{ min-width:40px }
.meta{ color:var(--muted); font-size:13px; margin-top:8px }
</style>
</head>
<body>
  <div class="container"><div class="card">
    <h1>Live Autocomplete</h1>
    <div id="text"></div>
    <div id="sugg" class="sugg"></div>
    <div id="kb" class="kb"></div>
    <div class="meta" id="meta">Type with your keyboard or the keys above.</div>
  </div></div>
<script>
const sid = localStorage.getItem("sid") || Math.random().toString(36).slice(2);
localStorage.setItem("sid", sid);
const $ = (s) => document.querySelector(s);
const rows = ["qwertyuiop", "asdfghjkl", "zxcvbnm", ".,!?"];

async function call(path, body){
  const resp = await fetch(`/api/${path}`, {
    method: body === undefined && path === "current-text" ? "GET" : "POST",
    headers: {"Content-Type": "application/json", "X-Session-Id": sid},
    body: body === undefined ? undefined : JSON.stringify(body),
  });
  const data = await resp.json();
  if(!resp.ok){ $("#meta").textContent = `Error: ${data.error}`; return; }
  render(data);
}
function render(d){
  if(d.currentText !== undefined) $("#text").textContent = d.currentText;
  if(!d.suggestions) return;
  $("#sugg").innerHTML = "";
  d.suggestions.forEach((w)=>{
    const b = document.createElement("button");
    b.className = "btn"; b.textContent = w;
    b.onclick = () => call("process-suggestion", {suggestion: w});
    $("#sugg").appendChild(b);
  });
}
function key(label, fn){
  const b = document.createElement("button");
  b.className = "btn"; b.textContent = label; b.onclick = fn; return b;
}
rows.forEach((r)=>{
  const row = document.createElement("div"); row.className = "row";
  [...r].forEach((c)=> row.appendChild(key(c, ()=>call("add-character", {character: c}))));
  $("#kb").appendChild(row);
});
const last = document.createElement("div"); last.className = "row";
last.appendChild(key("space", ()=>call("add-character", {character: " "})));
last.appendChild(key("⌫", ()=>call("remove-character", {})));
last.appendChild(key("clear", ()=>call("reset", {})));
$("#kb").appendChild(last);

window.addEventListener("keydown", (ev)=>{
  if(ev.ctrlKey || ev.metaKey || ev.altKey) return;
  if(ev.key === "Backspace"){ ev.preventDefault(); call("remove-character", {}); }
  else if(ev.key.length === 1){ ev.preventDefault(); call("add-character", {character: ev.key}); }
});
call("current-text");
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of Engine")
    ap.add_argument("--db", dest="db", default=None)  # DSN: "sqlite:///path" or "memory://"
    ap.add_argument("--model", default=None, help="Generative model id")
    ap.add_argument("--timeout", type=float, default=None, help="Generative timeout (seconds)")
    ap.add_argument("--no-llm", action="store_true", help="Store and offline tables only")
    ap.add_argument("--boundaries", choices=["basic", "extended"], default="basic",
                    help="extended also ends words on newline and tab")
    ap.add_argument("--fallback-transcript", default=None,
                    help="Text used when transcription fails (flagged with a note)")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=3001)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.model:
        CFG.GENERATIVE_MODEL = args.model
    if args.fallback_transcript is not None:
        CFG.TRANSCRIPTION_FALLBACK = args.fallback_transcript

    global _engine
    _engine = Engine()
    _engine.load(
        db_dsn=args.db,
        boundaries=CFG.EXTENDED_BOUNDARY_CHARS if args.boundaries == "extended" else CFG.BOUNDARY_CHARS,
        generative_timeout_s=args.timeout,
        use_generative=not args.no_llm,
        verbose=args.verbose,
    )

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose, threaded=True)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
