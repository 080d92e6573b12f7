GRAPH_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>newsgraph - Articles, Submitters, Tags</title>
    <link rel="icon" href="/favicon.ico">
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { background: #fafafa; font-family: -apple-system, sans-serif; overflow: hidden; }
        #frame { display: block; cursor: pointer; image-rendering: pixelated; }
        #info {
            position: absolute; top: 16px; left: 16px;
            background: rgba(255,255,255,0.9); padding: 10px 14px;
            border-radius: 6px; border: 1px solid #ddd;
            font-size: 12px; color: #555; pointer-events: none;
        }
        #info .brand { font-size: 18px; font-weight: 700; color: #222; }
        #info .hint { margin-top: 4px; }
        #stats { margin-top: 6px; color: #999; }
    </style>
</head>
<body>
    <div id="info">
        <div class="brand">newsgraph</div>
        <div class="hint">Click a <span style="color: red">tag</span> to load more articles,
            an article title to open it. Scroll to zoom, drag to pan.</div>
        <div id="stats"></div>
    </div>
    <img id="frame" alt="graph">

    <script>
        const img = document.getElementById('frame');
        const stats = document.getElementById('stats');
        const view = { zoom: 1.0, cx: 0.0, cy: 0.0 };
        let drag = null;
        let justDragged = false;

        function refresh() {
            const params = new URLSearchParams({
                zoom: view.zoom, cx: view.cx, cy: view.cy,
                width: window.innerWidth, height: window.innerHeight,
                t: Date.now(),
            });
            img.src = '/graph/frame.png?' + params;
            fetch('/health').then(r => r.json()).then(h => {
                stats.textContent = `${h.nodes} nodes, ${h.links} links, v${h.graph_version}` +
                    (h.pending_expansions ? `, ${h.pending_expansions} loading` : '');
                if (h.pending_expansions) setTimeout(refresh, 500);
            });
        }

        img.addEventListener('mousedown', e => { drag = { x: e.clientX, y: e.clientY, moved: false }; });
        window.addEventListener('mousemove', e => {
            if (!drag) return;
            const dx = e.clientX - drag.x, dy = e.clientY - drag.y;
            if (Math.abs(dx) + Math.abs(dy) > 3) drag.moved = true;
        });
        window.addEventListener('mouseup', e => {
            if (drag && drag.moved) {
                justDragged = true;
                view.cx -= (e.clientX - drag.x) / view.zoom;
                view.cy -= (e.clientY - drag.y) / view.zoom;
                drag = null;
                refresh();
                return;
            }
            drag = null;
        });

        img.addEventListener('click', async e => {
            if (justDragged) { justDragged = false; return; }
            const { x, y } = toFramePixels(e);
            const resp = await fetch('/graph/click', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ x, y }),
            });
            const result = await resp.json();
            if (result.action === 'open') {
                window.open(result.url, '_blank');
            } else if (result.action === 'expand') {
                setTimeout(refresh, 300);
            }
        });

        img.addEventListener('wheel', e => {
            e.preventDefault();
            view.zoom = Math.min(20, Math.max(0.1, view.zoom * (e.deltaY < 0 ? 1.1 : 1 / 1.1)));
            refresh();
        }, { passive: false });

        function toFramePixels(e) {
            const rect = img.getBoundingClientRect();
            return {
                x: (e.clientX - rect.left) * img.naturalWidth / rect.width,
                y: (e.clientY - rect.top) * img.naturalHeight / rect.height,
            };
        }

        let hoverPending = false;
        img.addEventListener('mousemove', e => {
            if (drag || hoverPending) return;
            hoverPending = true;
            const { x, y } = toFramePixels(e);
            fetch(`/graph/hover?x=${x}&y=${y}`)
                .then(r => r.json())
                .then(h => { img.title = h.label || ''; })
                .finally(() => { setTimeout(() => { hoverPending = false; }, 100); });
        });

        window.addEventListener('resize', refresh);
        refresh();
    </script>
</body>
</html>
"""
