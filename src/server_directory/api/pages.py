"""Inline HTML pages served by the API."""

_STYLE = """
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 2rem; }
      nav a { margin-right: 1rem; }
      .card { border: 1px solid #ddd; padding: 1rem; margin-bottom: 1rem; }
      .card img { max-width: 120px; display: block; margin-bottom: 0.5rem; }
      .pending { border-color: #e0a800; }
      label { display: block; margin-top: 0.8rem; }
      input, textarea { padding: 0.4rem 0.6rem; width: 360px; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
    </style>"""

_RENDER_SCRIPT = """
      function renderCard(server) {
        const card = document.createElement('div');
        card.className = 'card ' + server.status;
        if (server.imageUrl) {
          const img = document.createElement('img');
          img.src = server.imageUrl;
          card.appendChild(img);
        }
        const title = document.createElement('h3');
        title.textContent = server.serverName;
        const text = document.createElement('p');
        text.textContent = server.description;
        card.append(title, text, inviteElement(server.inviteLink));
        return card;
      }
      function inviteElement(inviteLink) {
        let url = null;
        try {
          url = new URL(inviteLink);
        } catch (error) {
          url = null;
        }
        if (url && (url.protocol === 'https:' || url.protocol === 'http:')) {
          const link = document.createElement('a');
          link.href = url.href;
          link.rel = 'noopener noreferrer';
          link.textContent = 'Join';
          return link;
        }
        const plain = document.createElement('code');
        plain.textContent = inviteLink;
        return plain;
      }"""

INDEX_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Server Directory</title>{_STYLE}
  </head>
  <body>
    <h1>Server Directory</h1>
    <nav id="nav"><a href="/auth/discord">Login with Discord</a></nav>
    <div id="servers">Loading...</div>
    <script>{_RENDER_SCRIPT}
      async function load() {{
        const userRes = await fetch('/api/user');
        if (userRes.ok) {{
          const user = await userRes.json();
          const nav = document.getElementById('nav');
          nav.textContent = 'Logged in as ' + user.username + ' ';
          nav.insertAdjacentHTML(
            'beforeend',
            '<a href="/add-server">Add server</a><a href="/logout">Logout</a>'
          );
          if (user.isAdmin) {{
            nav.insertAdjacentHTML('beforeend', '<a href="/admin">Moderation</a>');
          }}
        }}
        const res = await fetch('/api/servers');
        const container = document.getElementById('servers');
        container.textContent = '';
        const data = await res.json();
        for (const server of data.servers.filter((s) => s.status === 'approved')) {{
          container.appendChild(renderCard(server));
        }}
      }}
      load();
    </script>
  </body>
</html>
"""

ADD_SERVER_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Add a server</title>{_STYLE}
  </head>
  <body>
    <h1>Add a server</h1>
    <nav><a href="/">Back</a></nav>
    <form id="form">
      <label>Server name <input name="serverName" required /></label>
      <label>Invite link <input name="inviteLink" required /></label>
      <label>Description <textarea name="description" required></textarea></label>
      <label>Image <input name="image" type="file" accept="image/*" /></label>
      <p><button type="submit">Submit for review</button></p>
    </form>
    <p id="output"></p>
    <script>
      document.getElementById('form').addEventListener('submit', async (event) => {{
        event.preventDefault();
        const output = document.getElementById('output');
        const res = await fetch('/api/servers', {{
          method: 'POST',
          body: new FormData(event.target),
        }});
        output.textContent = res.ok
          ? 'Thanks! Your server is waiting for review.'
          : 'Error: ' + res.status;
      }});
    </script>
  </body>
</html>
"""

ADMIN_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Server Directory Moderation</title>{_STYLE}
  </head>
  <body>
    <h1>Moderation</h1>
    <nav><a href="/">Back</a></nav>
    <div id="servers">Loading...</div>
    <script>{_RENDER_SCRIPT}
      async function act(id, action) {{
        const res = await fetch('/api/servers/' + encodeURIComponent(id) + '/action', {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify({{ action }}),
        }});
        if (!res.ok) {{
          alert('Error: ' + res.status);
        }}
        load();
      }}
      async function load() {{
        const res = await fetch('/api/servers');
        const container = document.getElementById('servers');
        container.textContent = '';
        const data = await res.json();
        for (const server of data.servers) {{
          const card = renderCard(server);
          const by = document.createElement('p');
          by.textContent = server.status + ' · submitted by ' + server.submittedBy.username;
          card.appendChild(by);
          const actions = server.status === 'pending'
            ? ['approve', 'decline']
            : ['delete'];
          for (const action of actions) {{
            const button = document.createElement('button');
            button.textContent = action;
            button.onclick = () => act(server.id, action);
            card.appendChild(button);
          }}
          container.appendChild(card);
        }}
      }}
      load();
    </script>
  </body>
</html>
"""
