# app.py
from flask import Flask, Response, render_template, request, jsonify, url_for

import settings
from logs import configure, get_logger
from rewriter import FetchError, ValidationError, rewrite
from viewer import Status, proxy_links, resolve_link, run_submission

configure(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
log = get_logger(__name__)

app = Flask(__name__)
app.config.from_mapping(settings.as_flask_config())


def rewrite_with_config(url):
    return rewrite(
        url,
        timeout=app.config["FETCH_TIMEOUT"],
        user_agent=app.config["USER_AGENT"],
    )


def _request_values():
    # JSON from the client script, form fields from the no-JS page
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.values


# --- Routes ---

@app.route("/")
def index():
    return render_template("index.html", state=None)


@app.route("/fetch", methods=["POST"])
def fetch():
    url = _request_values().get("url")
    try:
        result = rewrite_with_config(url)
    except ValidationError as e:
        log.warning("Rejected fetch request: %s", e)
        return jsonify({"error": str(e)}), 400
    except FetchError as e:
        log.error("Error fetching URL: %s", e)
        return jsonify({"error": f"Failed to fetch content: {e}"}), 500
    return jsonify(result.to_dict())


# server-rendered viewer (main page form fallback)
@app.route("/go", methods=["GET", "POST"])
def go():
    values = request.values
    if "url" not in values and "href" not in values:
        return render_template("index.html", state=None)
    url = (values.get("url") or "").strip()
    base = (values.get("base") or "").strip()
    href = values.get("href")

    if base and href is not None:
        url = resolve_link(href, base)
        if url is None:
            # fragment or javascript: link, nothing to load
            return Response(status=204)

    errors = {}

    def fetch_for_view(target):
        try:
            return rewrite_with_config(target)
        except ValidationError:
            errors["status"] = 400
            raise
        except FetchError as e:
            log.error("Error fetching URL: %s", e)
            errors["status"] = 500
            raise FetchError(f"Failed to fetch content: {e}") from e

    state = run_submission(url, fetch_for_view)
    if state.status is Status.ERROR:
        return render_template("index.html", state=state), errors.get("status", 400)

    frame_content = proxy_links(
        state.content, lambda link: url_for("go", base=state.url, href=link)
    )
    return render_template("index.html", state=state, frame_content=frame_content)


if __name__ == "__main__":
    app.run(host=settings.HOST, port=settings.PORT, debug=False)
