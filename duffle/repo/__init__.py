"""Bundle repository indexes and semantic-version matching."""