"""A key/blob store interface and an implementation backed by a directory."""