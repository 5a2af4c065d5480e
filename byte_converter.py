import logging
from flask import Flask, jsonify, render_template_string, request

from byte_codecs import CODECS, DEFAULT_HRP, UnknownCodec
from conversion import SideParams, convert
from protobuf_view import VIEWS

app = Flask(__name__)
app.config.update(PORT=5001, DEBUG=False)
app.config.from_prefixed_env("BYTEZ")
logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')
NO_CODEC_FOUND = "no codec found"

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Bytez</title>
    <style>
        body { font-family: monospace; margin: 0; padding: 0; background: #000; color: #f1f1f1;
            min-height: 100vh; display: flex; justify-content: center; }
        .container { width: 560px; padding: 40px 16px 160px 16px; box-sizing: border-box; }
        h1 { margin-bottom: 4px; font-size: 2rem; color: #d1d5db; }
        .subtitle { margin-top: 0; color: #6b7280; font-size: 1.1rem; }
        label { display: block; margin-top: 28px; font-size: 0.9rem; color: #6b7280; user-select: none; }
        .row { display: flex; margin-top: 8px; }
        input[type=text] { flex-grow: 1; padding: 8px 12px; font-size: 0.95rem; border: 1px solid #374151;
            border-radius: 6px 0 0 6px; background: #1f2937; color: #f9fafb; outline: none; font-family: monospace; }
        input[type=text]:focus { border-color: #3730a3; }
        input.hrp { border-radius: 6px; width: 100%; box-sizing: border-box; margin-top: 8px; }
        button { padding: 8px 12px; border: 1px solid #374151; border-radius: 0 6px 6px 0; background: #000;
            color: #f9fafb; cursor: pointer; font-weight: 600; }
        button:hover { background: #111827; }
        button.hidden { display: none; }
        pre { margin-top: 8px; padding: 8px 12px; background: #1f2937; border: 1px solid #374151; border-radius: 6px;
            overflow-x: scroll; white-space: pre; }
        footer { font-size: 0.9rem; color: #9ca3af; margin-top: 30px; }
    </style>
</head>
<body>
<div class="container">
    <h1>Bytez</h1>
    <p class="subtitle">Convert bytes to different formats</p>
    <script>
        function updateInput(value) {
            document.getElementById("w-input").value = value;
            document.getElementById("w-input-fallback").value = value;
        }
    </script>
    <form method="get" action="/">
        <button id="w-input" type="submit" name="w" value="" class="hidden" tabindex="-1"></button>
        <input type="hidden" id="w-input-fallback" name="w" value="" />
        {% for key, value in passthrough %}
            <input type="hidden" name="{{ key }}" value="{{ value }}" />
        {% endfor %}
        {% for codec_id, label, placeholder, text in fields %}
            <label for="input-{{ codec_id }}">{{ label }}</label>
            {% if codec_id == 'bech32' %}
                <input id="input-hrp" class="hrp" type="text" name="hrp" value="{{ hrp }}"
                       placeholder="{{ default_hrp }}" onfocusin="updateInput('bech32')" />
            {% endif %}
            <div class="row">
                <input id="input-{{ codec_id }}" type="text" name="input-{{ codec_id }}" value="{{ text }}"
                       placeholder="{{ placeholder }}" onfocusin="updateInput('{{ codec_id }}')" />
                <button type="submit" name="w" value="{{ codec_id }}">Submit</button>
            </div>
        {% endfor %}
        {% for label, text in views %}
            <label>{{ label }}</label>
            <pre>{{ text }}</pre>
        {% endfor %}
    </form>
    <footer>Bytez</footer>
</div>
</body>
</html>
"""


def page_context(conversion, codecs, views):
    rendered = dict(conversion.renders)
    return {
        "fields": [(c.codec_id, c.label, c.placeholder, rendered[c.codec_id]) for c in codecs],
        "views": [(v.label, rendered[v.codec_id]) for v in views],
        "hrp": conversion.params.value("hrp"),
        "default_hrp": DEFAULT_HRP,
        "passthrough": conversion.params.passthrough(owned=("hrp",)),
    }


@app.route("/", methods=["GET"])
def index():
    params = SideParams.from_args(request.args)
    try:
        conversion = convert(params, CODECS, VIEWS)
    except UnknownCodec as e:
        logging.info(f"rejected request: {e}")
        return NO_CODEC_FOUND, 400, {"Content-Type": "text/plain; charset=utf-8"}
    except Exception as e:
        logging.error(f"An unhandled exception occurred: {e}", exc_info=True)
        return "A critical server error occurred. Please try again.", 500
    return render_template_string(HTML_TEMPLATE, **page_context(conversion, CODECS, VIEWS))


@app.route("/api/convert", methods=["GET"])
def api_convert():
    params = SideParams.from_args(request.args)
    try:
        conversion = convert(params)
    except UnknownCodec as e:
        logging.info(f"rejected request: {e}")
        return jsonify(error=NO_CODEC_FOUND), 400
    except Exception as e:
        logging.error(f"An unhandled exception occurred: {e}", exc_info=True)
        return jsonify(error="A critical server error occurred. Please try again."), 500
    return jsonify(
        codec=conversion.codec_id,
        state=conversion.state,
        error=str(conversion.error) if conversion.error else None,
        hex=conversion.data.hex(),
        renders=[{"codec": codec_id, "text": text} for codec_id, text in conversion.renders],
        params=conversion.params.to_dict(flat=False),
    )


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"], port=app.config["PORT"])
