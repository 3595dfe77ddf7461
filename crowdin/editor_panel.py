"""
Length Checker editor panel
HTML page loaded by Crowdin inside the editor (translations and right panels)
"""

import html

from config import Settings


def render_length_checker(settings: Settings) -> str:
    iframe_src = html.escape(settings.CROWDIN_IFRAME_SRC, quote=True)
    default_font = html.escape(settings.DEFAULT_FONT, quote=True)
    default_size = int(settings.DEFAULT_FONT_SIZE)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Length Checker</title>
    <script src="{iframe_src}"></script>
    <style>
        body {{ font-family: Arial, sans-serif; padding: 12px; color: #1f2937; }}
        .card {{ border: 1px solid #e5e7eb; border-radius: 6px; padding: 12px; margin-bottom: 12px; }}
        .ok {{ color: #10b981; }}
        .fail {{ color: #ef4444; }}
        .muted {{ color: #6b7280; font-size: 12px; }}
        textarea {{ width: 100%; box-sizing: border-box; }}
    </style>
</head>
<body>
    <canvas id="measure-canvas" style="display: none;"></canvas>

    <div class="card">
        <h3>Text Width</h3>
        <div id="status" class="muted">Waiting for the Crowdin editor...</div>
        <div id="translation"></div>
        <div id="width"></div>
        <div id="limit"></div>
        <div id="result"></div>
    </div>

    <div class="card">
        <h3>Measure Custom Text</h3>
        <textarea id="custom-text" rows="3"></textarea>
        <button id="measure-button">Measure</button>
        <button id="clear-button">Clear</button>
    </div>

    <script>
        const DEFAULT_FONT = "{default_font}";
        const DEFAULT_FONT_SIZE = {default_size};
        const state = {{ jwtToken: null, maxWidth: null, font: DEFAULT_FONT, fontSize: DEFAULT_FONT_SIZE, text: null }};

        function measureTextWidth(text) {{
            const ctx = document.getElementById('measure-canvas').getContext('2d');
            if (!ctx) return Math.round(text.length * state.fontSize * 0.5625);
            ctx.font = state.fontSize + 'px ' + state.font;
            return Math.round(ctx.measureText(text).width);
        }}

        function render() {{
            const setText = (id, value) => {{ document.getElementById(id).textContent = value; }};
            if (!state.text || !state.text.trim()) {{
                setText('translation', ''); setText('width', ''); setText('limit', ''); setText('result', '');
                return;
            }}
            const width = measureTextWidth(state.text);
            setText('translation', 'Text: ' + state.text);
            setText('width', 'Width: ' + width + 'px (' + state.fontSize + 'px ' + state.font + ')');
            const result = document.getElementById('result');
            if (state.maxWidth === null) {{
                setText('limit', 'No maximum width set for this string');
                result.textContent = '';
                return;
            }}
            setText('limit', 'Maximum: ' + state.maxWidth + 'px');
            if (width > state.maxWidth) {{
                result.className = 'fail';
                result.textContent = 'Exceeds maximum width by ' + (width - state.maxWidth) + ' pixels';
            }} else {{
                result.className = 'ok';
                result.textContent = 'Fits (' + (state.maxWidth - width) + 'px remaining)';
            }}
        }}

        function fetchStringData(stringId) {{
            if (!state.jwtToken) return;
            fetch('/api/strings/' + stringId + '?jwtToken=' + encodeURIComponent(state.jwtToken))
                .then(response => response.json().then(data => ({{ ok: response.ok, status: response.status, data }})))
                .then(({{ ok, status, data }}) => {{
                    if (!ok) throw new Error((data.detail) || ('HTTP error! status: ' + status));
                    const fields = data.fields || {{}};
                    const maxWidth = parseInt(fields.widthpx || data.MaxWidthPixel, 10);
                    state.maxWidth = maxWidth > 0 ? maxWidth : null;
                    state.font = fields.font || data.Font || DEFAULT_FONT;
                    state.fontSize = parseInt(fields.fontsize || fields.fontSize || data.FontSize, 10) || DEFAULT_FONT_SIZE;
                    render();
                }})
                .catch(error => {{
                    document.getElementById('status').textContent = 'Failed to fetch string data: ' + error.message;
                }});
        }}

        function updateTranslation(text, stringId) {{
            state.text = text;
            render();
            if (stringId) fetchStringData(stringId);
        }}

        document.getElementById('measure-button').addEventListener('click', () => {{
            const text = document.getElementById('custom-text').value;
            if (!text.trim()) {{
                document.getElementById('status').textContent = 'Please enter some text to measure.';
                return;
            }}
            state.text = text;
            render();
        }});

        document.getElementById('clear-button').addEventListener('click', () => {{
            state.text = null;
            document.getElementById('custom-text').value = '';
            render();
        }});

        setTimeout(() => {{
            if (!window.AP) {{
                document.getElementById('status').textContent =
                    'Crowdin events API not available. This feature only works within the Crowdin editor.';
                return;
            }}
            window.AP.getJwtToken(token => {{ state.jwtToken = token || null; }});
            if (window.AP.events && typeof window.AP.events.on === 'function') {{
                window.AP.events.on('textarea.edited', data => updateTranslation(data.newText || '', data.id));
                document.getElementById('status').textContent = 'Listening for translation edits';
            }}
        }}, 1000);
    </script>
</body>
</html>
"""
