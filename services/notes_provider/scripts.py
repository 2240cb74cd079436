"""JXA scripts run through osascript to read the Notes app.

The note scripts take the folder name as their first argument. The folder
listing takes no arguments.
"""

METADATA_SCRIPT = """
function run(argv) {
  const folderName = argv[0];
  const Notes = Application("Notes");
  const folder = Notes.folders.whose({ name: folderName })[0];

  const notesMetadata = folder.notes().map((note) => ({
    id: note.id(),
    modified: note.modificationDate().toISOString(),
  }));

  return JSON.stringify(notesMetadata);
}
"""

FULL_EXPORT_SCRIPT = """
function run(argv) {
  const folderName = argv[0];
  const Notes = Application("Notes");
  const folder = Notes.folders.whose({ name: folderName })[0];

  const notesData = folder.notes().map((note) => ({
    name: note.name(),
    id: note.id(),
    created: note.creationDate().toISOString(),
    modified: note.modificationDate().toISOString(),
    body: note.body(),
  }));

  return JSON.stringify({ notes: notesData, name: folderName }, null, 2);
}
"""

FOLDERS_SCRIPT = """
function run() {
  const Notes = Application("Notes");
  if (!Notes.running()) {
    Notes.activate();
  }

  const folderData = [];
  Notes.folders().forEach((folder) => {
    try {
      folderData.push({
        name: folder.name(),
        id: (() => {
          try { return folder.id(); } catch (e) { return null; }
        })(),
        noteCount: (() => {
          try { return folder.notes().length; } catch (e) { return 0; }
        })(),
      });
    } catch (e) {
      console.log(`Skipped folder: ${e.message}`);
    }
  });

  return JSON.stringify({ folders: folderData }, null, 2);
}
"""
