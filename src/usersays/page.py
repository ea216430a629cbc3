"""Static drag-and-drop upload page served for every non-API request."""

INDEX_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>usersays upload</title>
    <meta http-equiv="Content-Type" content="text/html; charset=UTF-8">
    <style>
        html { font-family: Arial, sans-serif; }
        #dropzone { margin: 30px; width: 500px; height: 100px; border: 1px dotted grey; }
        #result { margin: 30px; white-space: pre-wrap; }
    </style>
    <script type="application/javascript">
        function sendFile(file, resultElement) {
            const xhr = new XMLHttpRequest();
            const form = new FormData();
            xhr.open("POST", "/api/uploadFile", true);
            xhr.onreadystatechange = function () {
                if (xhr.readyState === 4 && xhr.status === 200) {
                    resultElement.innerText = xhr.responseText;
                }
            };
            form.append("myFile", file);
            xhr.send(form);
        }

        window.onload = function () {
            const result = document.getElementById("result");
            const dropzone = document.getElementById("dropzone");
            dropzone.ondragover = dropzone.ondragenter = function (event) {
                event.stopPropagation();
                event.preventDefault();
            };
            dropzone.ondrop = function (event) {
                event.stopPropagation();
                event.preventDefault();
                for (const file of event.dataTransfer.files) {
                    sendFile(file, result);
                }
            };
        };
    </script>
</head>
<body>
<div>
    <div id="dropzone">Drag &amp; drop your agent export (.zip) here...</div>
    <div id="result"></div>
</div>
</body>
</html>
"""
