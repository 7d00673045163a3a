"""Browser UI for managing users."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

if TYPE_CHECKING:
    from user_management.containers import AppContainer

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def user_ui(request: Request) -> HTMLResponse:
    """Form and table UI that consumes the user API."""
    container: AppContainer = request.app.state.container
    settings = container.settings
    log_level = "info" if settings.environment == "production" else "debug"
    html = _UI_HTML.replace("__API_BASE_URL__", _js_literal(settings.api_base_url))
    html = html.replace("__LOG_LEVEL__", _js_literal(log_level))
    return HTMLResponse(html)


def _js_literal(value: str) -> str:
    return json.dumps(value.rstrip("/")).replace("<", "\\u003c")


_UI_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>User Management System</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; }
      header { background: #282c34; color: #fff; padding: 1rem 2rem; }
      main { display: flex; gap: 2rem; padding: 2rem; flex-wrap: wrap; }
      .panel { flex: 1 1 320px; }
      .form-group { margin-bottom: 0.8rem; }
      label { display: block; margin-bottom: 0.2rem; }
      input { padding: 0.4rem 0.6rem; width: 100%; box-sizing: border-box; }
      button { padding: 0.4rem 0.8rem; margin-right: 0.5rem; }
      .error-message { background: #fdecea; color: #b71c1c; padding: 0.6rem; }
      table { border-collapse: collapse; width: 100%; }
      th, td { border-bottom: 1px solid #ddd; padding: 0.4rem; text-align: left; }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <header><h1>User Management System</h1></header>
    <main>
      <section class="panel">
        <h2 id="form-title">Add New User</h2>
        <div id="error" class="error-message hidden"></div>
        <form id="user-form" novalidate>
          <div class="form-group">
            <label for="name">Name:</label>
            <input type="text" id="name" name="name" placeholder="Enter name" />
          </div>
          <div class="form-group">
            <label for="phone">Phone:</label>
            <input type="tel" id="phone" name="phone"
                   placeholder="Enter phone number" />
          </div>
          <div class="form-group">
            <label for="email">Email:</label>
            <input type="email" id="email" name="email" placeholder="Enter email" />
          </div>
          <button type="submit" id="submit-btn">Add</button>
          <button type="button" id="cancel-btn" class="hidden">Cancel</button>
        </form>
        <p>
          <button type="button" id="export-logs">Export logs</button>
          <button type="button" id="clear-logs">Clear logs</button>
        </p>
      </section>
      <section class="panel">
        <h2>Users List</h2>
        <div id="users"></div>
      </section>
    </main>
    <script>
      const API_BASE_URL = __API_BASE_URL__;
      const LOG_KEY = 'usermanagement_logs';
      const LOG_LEVELS = { error: 0, warn: 1, info: 2, debug: 3 };
      const LOG_LEVEL = __LOG_LEVEL__;
      const MAX_LOG_LINES = 1000;

      const logger = {
        format(level, message, data) {
          const suffix = data ? ' | ' + JSON.stringify(data) : '';
          return `[${new Date().toISOString()}] [${level.toUpperCase()}] ${message}${suffix}\\n`;
        },
        log(level, message, data) {
          if (LOG_LEVELS[level] > LOG_LEVELS[LOG_LEVEL]) return;
          const entry = this.format(level, message, data);
          (console[level] || console.log)(entry.trim());
          try {
            const lines = ((localStorage.getItem(LOG_KEY) || '') + entry).split('\\n');
            localStorage.setItem(LOG_KEY, lines.slice(-MAX_LOG_LINES).join('\\n'));
          } catch (err) {
            console.warn('Could not save log to localStorage:', err);
          }
        },
        exportLogs() {
          const logs = localStorage.getItem(LOG_KEY) || '';
          if (!logs) return;
          const url = URL.createObjectURL(new Blob([logs], { type: 'text/plain' }));
          const a = document.createElement('a');
          a.href = url;
          a.download = `usermanagement_logs_${new Date().toISOString().split('T')[0]}.txt`;
          document.body.appendChild(a);
          a.click();
          document.body.removeChild(a);
          URL.revokeObjectURL(url);
        },
        clearLogs() { localStorage.removeItem(LOG_KEY); },
        error(m, d) { this.log('error', m, d); },
        warn(m, d) { this.log('warn', m, d); },
        info(m, d) { this.log('info', m, d); },
        debug(m, d) { this.log('debug', m, d); },
      };

      const state = {
        records: [],
        formFields: { name: '', phone: '', email: '' },
        editingId: null,
        pending: false,
        lastError: '',
      };
      const fields = ['name', 'phone', 'email'];

      async function request(method, path, body) {
        const options = { method, headers: {} };
        if (body !== undefined) {
          options.headers['Content-Type'] = 'application/json';
          options.body = JSON.stringify(body);
        }
        const res = await fetch(API_BASE_URL + path, options);
        const data = await res.json().catch(() => null);
        if (!res.ok) {
          const err = new Error('Request failed: ' + res.status);
          err.serverMessage = data && data.error;
          throw err;
        }
        return data;
      }

      function setPending(pending) {
        state.pending = pending;
        render();
      }

      async function fetchUsers() {
        try {
          logger.debug('Fetching users');
          state.records = await request('GET', '/api/users');
          state.lastError = '';
          logger.info(`Fetched ${state.records.length} users`);
        } catch (err) {
          state.lastError = 'Failed to fetch users';
          logger.error('Error fetching users', { message: err.message });
        }
        render();
      }

      async function handleSubmit(event) {
        event.preventDefault();
        fields.forEach((f) => { state.formFields[f] = document.getElementById(f).value; });
        const { name, phone, email } = state.formFields;
        if (!name || !phone || !email) {
          state.lastError = 'All fields are required';
          logger.warn('Form submitted with missing fields');
          render();
          return;
        }
        setPending(true);
        try {
          if (state.editingId !== null) {
            await request('PUT', `/api/users/${state.editingId}`, state.formFields);
            logger.info('User updated', { id: state.editingId });
            state.editingId = null;
          } else {
            const created = await request('POST', '/api/users', state.formFields);
            logger.info('User created', { id: created.id });
          }
          state.formFields = { name: '', phone: '', email: '' };
          state.lastError = '';
          await fetchUsers();
        } catch (err) {
          state.lastError = err.serverMessage || 'Failed to save user';
          logger.error('Error saving user', { message: err.message });
        } finally {
          setPending(false);
        }
      }

      function handleEdit(record) {
        state.formFields = { name: record.name, phone: record.phone, email: record.email };
        state.editingId = record.id;
        render();
      }

      async function handleDelete(id) {
        if (!window.confirm('Are you sure you want to delete this user?')) return;
        setPending(true);
        try {
          await request('DELETE', `/api/users/${id}`);
          logger.info('User deleted', { id });
          state.lastError = '';
          await fetchUsers();
        } catch (err) {
          state.lastError = 'Failed to delete user';
          logger.error('Error deleting user', { id, message: err.message });
        } finally {
          setPending(false);
        }
      }

      function handleCancel() {
        state.editingId = null;
        state.formFields = { name: '', phone: '', email: '' };
        state.lastError = '';
        render();
      }

      function cell(text) {
        const td = document.createElement('td');
        td.textContent = text;
        return td;
      }

      function render() {
        const editing = state.editingId !== null;
        document.getElementById('form-title').textContent =
          editing ? 'Edit User' : 'Add New User';
        fields.forEach((f) => { document.getElementById(f).value = state.formFields[f]; });
        const submit = document.getElementById('submit-btn');
        submit.disabled = state.pending;
        submit.textContent = state.pending ? 'Saving...' : (editing ? 'Update' : 'Add');
        document.getElementById('cancel-btn').classList.toggle('hidden', !editing);
        const error = document.getElementById('error');
        error.textContent = state.lastError;
        error.classList.toggle('hidden', !state.lastError);

        const container = document.getElementById('users');
        container.innerHTML = '';
        if (state.records.length === 0) {
          container.textContent = state.pending
            ? 'Loading users...'
            : 'No users found. Add your first user above!';
          return;
        }
        const table = document.createElement('table');
        const head = table.createTHead().insertRow();
        ['ID', 'Name', 'Phone', 'Email', 'Actions'].forEach((label) => {
          const th = document.createElement('th');
          th.textContent = label;
          head.appendChild(th);
        });
        const body = table.createTBody();
        state.records.forEach((record) => {
          const row = body.insertRow();
          [record.id, record.name, record.phone, record.email].forEach((value) => {
            row.appendChild(cell(value));
          });
          const actions = document.createElement('td');
          const edit = document.createElement('button');
          edit.textContent = 'Edit';
          edit.disabled = state.pending;
          edit.onclick = () => handleEdit(record);
          const remove = document.createElement('button');
          remove.textContent = 'Delete';
          remove.disabled = state.pending;
          remove.onclick = () => handleDelete(record.id);
          actions.append(edit, remove);
          row.appendChild(actions);
        });
        container.appendChild(table);
      }

      document.getElementById('user-form').addEventListener('submit', handleSubmit);
      document.getElementById('cancel-btn').addEventListener('click', handleCancel);
      document.getElementById('export-logs').addEventListener('click', () => logger.exportLogs());
      document.getElementById('clear-logs').addEventListener('click', () => logger.clearLogs());
      fields.forEach((f) => {
        document.getElementById(f).addEventListener('input', (e) => {
          state.formFields[f] = e.target.value;
        });
      });

      setPending(true);
      fetchUsers().finally(() => setPending(false));
    </script>
  </body>
</html>
"""
