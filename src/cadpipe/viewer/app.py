"""
FastAPI app serving a triangulated model to the browser viewer.

The page loads the mesh from /model.stl and renders it with Three.js.
"""

import io

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response, JSONResponse
import trimesh


def mesh_info(mesh: trimesh.Trimesh, name: str) -> dict:
    """Statistics shown in the viewer's info panel."""
    bounds = mesh.bounds
    if bounds is None:
        dims = (0.0, 0.0, 0.0)
    else:
        dims = tuple(float(d) for d in bounds[1] - bounds[0])

    return {
        "name": name,
        "dimensions": {"x": dims[0], "y": dims[1], "z": dims[2]},
        "triangles": len(mesh.faces),
        "vertices": len(mesh.vertices),
        "is_watertight": bounds is not None and bool(mesh.is_watertight),
    }


def create_viewer_app(mesh: trimesh.Trimesh, name: str = "model") -> FastAPI:
    """
    Create the viewer app for a mesh.

    Args:
        mesh: Triangle mesh to display
        name: Model name shown in the page

    Returns:
        FastAPI application
    """
    app = FastAPI(title="cadpipe viewer")

    buffer = io.BytesIO()
    mesh.export(buffer, file_type="stl")
    stl_bytes = buffer.getvalue()
    info = mesh_info(mesh, name)

    @app.get("/")
    async def viewer_page():
        """Serve the Three.js viewer HTML."""
        return HTMLResponse(content=VIEWER_HTML)

    @app.get("/model.stl")
    async def get_model_stl():
        """Serve the mesh as binary STL."""
        return Response(content=stl_bytes, media_type="application/octet-stream")

    @app.get("/model/info")
    async def get_model_info():
        """Return mesh statistics."""
        return JSONResponse(content=info)

    return app


# Embedded HTML/JS/CSS for the viewer (to avoid external file dependencies)
VIEWER_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>cadpipe viewer</title>
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #1a1a2e;
            color: #eee;
            overflow: hidden;
        }
        #viewer-container { width: 100vw; height: 100vh; }
        #info-panel {
            position: fixed;
            top: 20px;
            left: 20px;
            background: rgba(0,0,0,0.7);
            padding: 15px 20px;
            border-radius: 8px;
            min-width: 200px;
        }
        #info-panel h2 { font-size: 16px; margin-bottom: 10px; color: #3498db; }
        .info-row {
            display: flex;
            justify-content: space-between;
            gap: 12px;
            margin: 5px 0;
            font-size: 13px;
        }
        .info-row .label { color: #888; }
        #error {
            position: fixed;
            top: 50%;
            left: 50%;
            transform: translate(-50%, -50%);
            color: #e74c3c;
            display: none;
        }
    </style>
    <script type="importmap">
    {
        "imports": {
            "three": "https://unpkg.com/three@0.160.0/build/three.module.js",
            "three/addons/": "https://unpkg.com/three@0.160.0/examples/jsm/"
        }
    }
    </script>
</head>
<body>
    <div id="viewer-container"></div>
    <div id="info-panel">
        <h2 id="model-name">Loading...</h2>
        <div class="info-row"><span class="label">Size</span><span id="model-size">-</span></div>
        <div class="info-row"><span class="label">Triangles</span><span id="model-triangles">-</span></div>
        <div class="info-row"><span class="label">Watertight</span><span id="model-watertight">-</span></div>
    </div>
    <div id="error"></div>

    <script type="module">
        import * as THREE from 'three';
        import { OrbitControls } from 'three/addons/controls/OrbitControls.js';
        import { STLLoader } from 'three/addons/loaders/STLLoader.js';

        const container = document.getElementById('viewer-container');
        const scene = new THREE.Scene();
        scene.background = new THREE.Color(0x1a1a2e);

        const camera = new THREE.PerspectiveCamera(45, window.innerWidth / window.innerHeight, 0.001, 100000);
        const renderer = new THREE.WebGLRenderer({ antialias: true });
        renderer.setSize(window.innerWidth, window.innerHeight);
        container.appendChild(renderer.domElement);

        const controls = new OrbitControls(camera, renderer.domElement);
        controls.enableDamping = true;

        scene.add(new THREE.AmbientLight(0xffffff, 0.5));
        const light = new THREE.DirectionalLight(0xffffff, 1.0);
        light.position.set(1, 1, 1);
        scene.add(light);

        function showError(message) {
            const el = document.getElementById('error');
            el.textContent = message;
            el.style.display = 'block';
        }

        fetch('/model/info')
            .then(r => r.json())
            .then(info => {
                const d = info.dimensions;
                document.getElementById('model-name').textContent = info.name;
                document.getElementById('model-size').textContent =
                    `${d.x.toFixed(2)} x ${d.y.toFixed(2)} x ${d.z.toFixed(2)}`;
                document.getElementById('model-triangles').textContent = info.triangles.toLocaleString();
                document.getElementById('model-watertight').textContent = info.is_watertight ? 'Yes' : 'No';
            })
            .catch(err => showError(`Failed to load model info: ${err}`));

        new STLLoader().load('/model.stl', geometry => {
            geometry.computeVertexNormals();
            geometry.computeBoundingSphere();

            const material = new THREE.MeshStandardMaterial({ color: 0x3498db, flatShading: false });
            const mesh = new THREE.Mesh(geometry, material);
            scene.add(mesh);

            const sphere = geometry.boundingSphere;
            const radius = Math.max(sphere.radius, 1e-6);
            controls.target.copy(sphere.center);
            camera.position.copy(sphere.center).add(new THREE.Vector3(radius * 2, radius * 2, radius * 2));
            camera.near = radius / 1000;
            camera.far = radius * 1000;
            camera.updateProjectionMatrix();
        }, undefined, err => showError(`Failed to load model: ${err}`));

        window.addEventListener('resize', () => {
            camera.aspect = window.innerWidth / window.innerHeight;
            camera.updateProjectionMatrix();
            renderer.setSize(window.innerWidth, window.innerHeight);
        });

        function animate() {
            requestAnimationFrame(animate);
            controls.update();
            renderer.render(scene, camera);
        }
        animate();
    </script>
</body>
</html>
"""
